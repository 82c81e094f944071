"""
Domain Constants

Centrally manages the codes and slot inventories shared across the scorer.
"""

# Marker that replaces a document id or offset field under lenient matching
WILDCARD = "*"

# Document id a system uses to assert that no filler exists
NIL = "NIL"

# First id handed out to key records whose equivalence class is 0
EQUIVALENCE_CLASS_BASE = 1_000_000

# Field counts of the input streams
KEY_FIELD_COUNT = 12
RESPONSE_MIN_FIELDS = 4
RESPONSE_MAX_FIELDS = 10

SINGLE = "single"
LIST = "list"

SINGLE_VALUED_SLOTS = frozenset([
    "per:date_of_birth",
    "per:age",
    "per:country_of_birth",
    "per:stateorprovince_of_birth",
    "per:city_of_birth",
    "per:date_of_death",
    "per:country_of_death",
    "per:stateorprovince_of_death",
    "per:city_of_death",
    "per:cause_of_death",
    "per:religion",
    "org:number_of_employees_members",
    "org:date_founded",
    "org:date_dissolved",
    "org:country_of_headquarters",
    "org:stateorprovince_of_headquarters",
    "org:city_of_headquarters",
    "org:website",
])

LIST_VALUED_SLOTS = frozenset([
    "per:alternate_names",
    "per:origin",
    "per:countries_of_residence",
    "per:statesorprovinces_of_residence",
    "per:cities_of_residence",
    "per:schools_attended",
    "per:title",
    "per:employee_or_member_of",
    "per:spouse",
    "per:children",
    "per:parents",
    "per:siblings",
    "per:other_family",
    "per:charges",
    "org:alternate_names",
    "org:political_religious_affiliation",
    "org:top_members_employees",
    "org:members",
    "org:member_of",
    "org:subsidiaries",
    "org:parents",
    "org:founded_by",
    "org:shareholders",
    "per:awards_won",
    "per:charities_supported",
    "per:diseases",
    "org:products",
    # sentiment slots
    "per:pos-from",
    "per:neg-from",
    "per:pos-towards",
    "per:neg-towards",
    "org:pos-from",
    "org:neg-from",
    "org:pos-towards",
    "org:neg-towards",
    "gpe:pos-from",
    "gpe:neg-from",
    "gpe:pos-towards",
    "gpe:neg-towards",
])
