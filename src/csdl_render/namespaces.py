"""XML namespace definitions for CSDL documents.

Based on OData Version 4.0 Part 3: Common Schema Definition Language.
"""

# Entity Data Model namespace, default namespace of every Schema element
EDM = "http://docs.oasis-open.org/odata/ns/edm"

# Entity Data Model for Data Services Packaging (the envelope)
EDMX = "http://docs.oasis-open.org/odata/ns/edmx"

# Aggregator extension namespace declared on the envelope and every Schema
AGS = "http://aggregator.microsoft.com/internal"

EDMX_PREFIX = "edmx"
AGS_PREFIX = "ags"

EDMX_VERSION = "4.0"

ENVELOPE_NSMAP = {
    AGS_PREFIX: AGS,
    EDMX_PREFIX: EDMX,
}

SCHEMA_NSMAP = {
    None: EDM,
    AGS_PREFIX: AGS,
}
