# Automatically load all models so metadata knows them
from prestamistas.models.customer_model import Customer
from prestamistas.models.loan_model import Loan
from prestamistas.models.payment_model import Payment
from prestamistas.models.system_settings_model import SystemSetting
from prestamistas.models.user_model import User
