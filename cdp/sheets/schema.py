# cdp/sheets/schema.py

DATA_SHEET_NAME_DEFAULT = "data"
CAMPAIGNS_SHEET_NAME_DEFAULT = "campaigns"

# Columns every `data` worksheet must carry.
# Keep this order stable; it is the order fields are read and printed in.
DATA_COLUMNS_V1: list[str] = [
    "campaign",
    "company_name",
    "market",
    "url",
    "contact_email",
    "contact_phone",
    "contact_url",
    "observed_on",
    "observed_source_url",
    "enabled",
]

# May be absent; missing identifiers are derived from campaign/market/company_name.
DATA_COLUMNS_OPTIONAL_V1: list[str] = [
    "identifier",
]

CAMPAIGN_COLUMNS_V1: list[str] = [
    "name",
    "description_html",
    "contact_template",
]

DATE_COLUMN_TYPE = "date"
