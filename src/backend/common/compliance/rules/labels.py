"""Column labels of the uploaded templates, as mapped by the upload step."""

# General Ledger
JOURNAL_ENTRY_NUMBER = "Journal Entry Number"
JOURNAL_DESCRIPTION = "Journal Description"
ENTRY_DATE = "Entry Date"
DOCUMENT_DATE = "Document Date"
DEBIT = "Debit In Reporting Currency"
CREDIT = "Credit In Reporting Currency"
USER_PREPARED = "User Prepared"
GL_CODE = "GL Code"

# Sales Register
INVOICE_NUMBER = "Invoice Number"
INVOICE_DATE = "Invoice Date"
INVOICE_VALUE = "Invoice Value"
TAXABLE_VALUE = "Taxable Value"
ITEM_CODE = "Item Code"
ITEM_NAME = "Item Name"
SALE_QUANTITY = "Sale Quantity"

# Purchase Register
PURCHASE_REFERENCE_NUMBER = "Purchase Reference Number"
PURCHASE_REFERENCE_DATE = "Purchase Reference Date"
VENDOR_NUMBER = "Vendor Number"
VENDOR_NAME = "Vendor Name"
RATE = "Rate"

# Pay Register
EMPLOYEE_CODE = "Employee Code"
EMPLOYEE_NAME = "Employee Name"
PAN_NUMBER = "PAN Number"
PAY_PERIOD = "Pay Period"
DESIGNATION = "Designation"
GROSSPAY = "Grosspay"

# Customer Listing
CUSTOMER_CODE = "Customer Code"
CUSTOMER_NAME = "Customer Name"
OUTSTANDING_VALUE = "Outstanding Value"
DUE_DATE = "Due Date"

# Fixed Assets Register
ASSET_NUMBER = "Fixed Asset Number"
ASSET_CLASSIFICATION = "Fixed Asset Classification"
ASSET_DESCRIPTION = "Fixed Asset Description"
