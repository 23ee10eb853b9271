from enum import Enum


class Collections(str, Enum):
    CATEGORIES = "categories"
    PRODUCTS = "products"
    BANNERS = "banners"


class CacheKeys(str, Enum):
    CATEGORIES = "categories:all"
    PRODUCTS_ALL = "products:all"
    PRODUCTS_FEATURED = "products:featured"
    BANNERS = "banners:all"


class CacheState(str, Enum):
    HIT = "hit"
    MISS = "miss"
    BYPASS = "bypass"


class BannerType(str, Enum):
    PROMOTIONAL = "PROMOTIONAL"
    CATEGORY = "CATEGORY"
    PRODUCT = "PRODUCT"
    OFFER = "OFFER"


class TimeSlot(str, Enum):
    ALL_DAY = "ALL_DAY"
    MORNING = "MORNING"
    AFTERNOON = "AFTERNOON"
    EVENING = "EVENING"
    NIGHT = "NIGHT"


CACHE_HEADER = "X-Cache"

DEFAULT_PRODUCT_UNIT = "1 piece"
DEFAULT_DELIVERY_TIME = 24
DEFAULT_ADDRESS_LABEL = "Home"

OBJECT_ID_PATTERN = r"^[a-fA-F0-9]{24}$"
