MAX_PAGE_SIZE = 250
DEFAULT_PAGE_SIZE = 20
LOOKUP_PAGE_SIZE = 12

CARDS_COLLECTION = "cards"

# Market price per TCGplayer print variant
PRICE_VARIANT_PATHS = [
    "tcgplayer.prices.holofoil.market",
    "tcgplayer.prices.normal.market",
    "tcgplayer.prices.reverseHolofoil.market",
    "tcgplayer.prices.1stEditionHolofoil.market",
    "tcgplayer.prices.1stEditionNormal.market",
    "tcgplayer.prices.unlimitedHolofoil.market",
]

DEFAULT_SORT = [
    ("set.releaseDate", -1),
    ("number", -1),
]

SORT_FIELD_ALIASES = {
    "set.releaseDate": "set.releaseDate",
    "releaseDate": "set.releaseDate",
    "name": "name",
    "hp": "hp",
    "number": "number",
    "tcgplayer.prices.holofoil.market": "tcgplayer.prices.holofoil.market",
    "price": "tcgplayer.prices.holofoil.market",
}
