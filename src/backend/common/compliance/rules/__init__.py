from .repeating_numbers_journal import REPEATING_NUMBERS_JOURNAL
from .last_5_digits import LAST_5_DIGITS
from .journals_with_keywords import JOURNALS_WITH_KEYWORDS
from .entries_before_doc_date import ENTRIES_BEFORE_DOC_DATE
from .holiday_entries import HOLIDAY_ENTRIES
from .compound_journal_entries import COMPOUND_JOURNAL_ENTRIES
from .duplicate_invoices import DUPLICATE_INVOICES
from .missing_invoice_sequence import MISSING_INVOICE_SEQUENCE
from .sudden_volume_spike import SUDDEN_VOLUME_SPIKE
from .sudden_purchase_price_spike import SUDDEN_PURCHASE_PRICE_SPIKE
from .vendor_price_difference import VENDOR_PRICE_DIFFERENCE
from .duplicate_employee_code import DUPLICATE_EMPLOYEE_CODE
from .duplicate_pan import DUPLICATE_PAN
from .payroll_cost_spike import PAYROLL_COST_SPIKE
from .customer_days_outstanding import CUSTOMER_DAYS_OUTSTANDING
from .long_outstanding_customers import LONG_OUTSTANDING_CUSTOMERS
from .negative_receivables import NEGATIVE_RECEIVABLES
from .keyword_narrations import KEYWORD_NARRATIONS
from .duplicate_asset_codes import DUPLICATE_ASSET_CODES
