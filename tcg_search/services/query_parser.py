import re
from typing import Dict

# field:"quoted value" or field:bare-token. A value opening with a quote that
# is never closed fails the quoted branch and is read as a bare token, so the
# quote character stays in the value.
TOKEN_PATTERN = re.compile(r'([\w.]+):(?:"([^"]*)"|(\S*))')


def parse_query(query: str) -> Dict[str, str]:
    """Parse a Lucene-ish query string into field/value pairs

    >>> parse_query('name:Charizard* rarity:"Special illustration rare"')
    {'name': 'Charizard', 'rarity': 'Special illustration rare'}

    Text that is not a ``field:value`` token is ignored, and a repeated field
    keeps its last value.
    """
    filters: Dict[str, str] = {}
    if not query:
        return filters

    for match in TOKEN_PATTERN.finditer(query):
        field, quoted, bare = match.groups()
        value = quoted if quoted is not None else bare
        if value.endswith("*"):
            value = value[:-1]
        filters[field] = value
    return filters
