from prestamistas.schemas.customer_schemas import (
    CustomerCreate,
    CustomerListOut,
    CustomerOut,
    CustomerUpdate,
)
from prestamistas.schemas.loan_schema import (
    LoanCreate,
    LoanDefaultsOut,
    LoanOut,
    LoanQuoteIn,
    LoanQuoteOut,
    LoanStatsOut,
    LoanUpdate,
    LoanWithCustomerOut,
)
from prestamistas.schemas.payment_schemas import (
    PaymentCreate,
    PaymentOut,
    PaymentUpdate,
    PaymentWithLoanOut,
)
from prestamistas.schemas.report_schemas import DashboardOut, RangeReportOut
from prestamistas.schemas.settings_schema import SettingCreate, SettingOut, SettingPatch
from prestamistas.schemas.user_schemas import (
    PasswordChange,
    PasswordSet,
    ProfileUpdate,
    RegisterIn,
    TokenOut,
    UserCreate,
    UserOut,
    UserUpdate,
)
