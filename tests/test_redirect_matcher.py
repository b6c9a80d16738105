from seo_sync.utils.redirect_matcher import (
    COLLECTION,
    HOME_PATH,
    PRODUCT,
    Match,
    extract_keywords,
    find_best_match,
    find_exact_match,
    redirect_path,
    resolve_redirect,
    similarity_score,
    url_type,
    validate_redirect,
)

PRODUCTS = [
    {"id": "gid://shopify/Product/1", "title": "Red Leather Wallet", "handle": "red-leather-wallet",
     "productType": "Wallets", "tags": ["leather", "gift"]},
    {"id": "gid://shopify/Product/2", "title": "Canvas Tote Bag", "handle": "canvas-tote",
     "productType": "Bags", "tags": ["summer"]},
]
COLLECTIONS = [
    {"id": "gid://shopify/Collection/1", "title": "Leather Goods", "handle": "leather-goods",
     "description": "Wallets, belts and more"},
    {"id": "gid://shopify/Collection/2", "title": "Summer Sale", "handle": "summer-sale",
     "description": ""},
]


def test_extract_keywords_strips_prefix_and_stop_words():
    url = "https://shop.example.com/products/the-red-leather-wallet-for-men/"
    assert extract_keywords(url) == ["red", "leather", "wallet", "men"]


def test_extract_keywords_drops_short_words_and_symbols():
    url = "https://shop.example.com/collections/ab_cd/x-large.tees"
    assert extract_keywords(url) == ["large", "tees"]


def test_extract_keywords_root_url_has_none():
    assert extract_keywords("https://shop.example.com/") == []


def test_similarity_score_weights_title_over_handle_over_rest():
    item = {"title": "Wallet", "handle": "red-thing", "productType": "", "tags": ["leather"]}
    # wallet -> title (3), red -> handle (2), leather -> tags (1), blue -> none
    assert similarity_score(["wallet", "red", "leather", "blue"], item) == 6 / 4


def test_similarity_score_without_keywords_is_zero():
    assert similarity_score([], PRODUCTS[0]) == 0


def test_url_type_prefers_collections():
    assert url_type("https://x.com/collections/sale/products/thing") == COLLECTION
    assert url_type("https://x.com/products/thing") == PRODUCT
    assert url_type("https://x.com/pages/about") is None


def test_find_best_match_respects_preferred_type():
    keywords = ["leather"]
    product = find_best_match(keywords, PRODUCTS, COLLECTIONS, PRODUCT)
    collection = find_best_match(keywords, PRODUCTS, COLLECTIONS, COLLECTION)
    assert product.type == PRODUCT and product.item["handle"] == "red-leather-wallet"
    assert collection.type == COLLECTION and collection.item["handle"] == "leather-goods"


def test_find_best_match_without_preference_keeps_first_on_tie():
    match = find_best_match(["leather"], PRODUCTS, COLLECTIONS)
    assert match.type == PRODUCT


def test_find_best_match_below_threshold_returns_none():
    # one weak hit (tags) out of four keywords = 0.25
    assert find_best_match(["gift", "zzz", "yyy", "xxx"], PRODUCTS, COLLECTIONS) is None


def test_find_exact_match_by_handle():
    match = find_exact_match("https://x.com/collections/summer-sale?page=2", PRODUCTS, COLLECTIONS)
    assert match == Match(item=COLLECTIONS[1], type=COLLECTION, score=1.0, exact=True)
    assert find_exact_match("https://x.com/products/gone", PRODUCTS, COLLECTIONS) is None


def test_validate_redirect():
    assert validate_redirect("/products/canvas-tote", PRODUCTS, COLLECTIONS)
    assert validate_redirect("/collections/leather-goods", PRODUCTS, COLLECTIONS)
    assert validate_redirect("/", PRODUCTS, COLLECTIONS)
    assert not validate_redirect("/products/missing", PRODUCTS, COLLECTIONS)
    assert not validate_redirect("/pages/about", PRODUCTS, COLLECTIONS)


def test_redirect_path():
    assert redirect_path(Match(item=PRODUCTS[1], type=PRODUCT, score=1.0)) == "/products/canvas-tote"


def test_resolve_redirect_home_keyword_wins():
    assert resolve_redirect("https://x.com/products/ABDOS-red-leather", PRODUCTS, COLLECTIONS) == (HOME_PATH, "home_keyword")


def test_resolve_redirect_exact_match():
    assert resolve_redirect("https://x.com/products/canvas-tote", PRODUCTS, COLLECTIONS) == ("/products/canvas-tote", "exact_match")


def test_resolve_redirect_keyword_match():
    target, reason = resolve_redirect("https://x.com/products/old-leather-wallet-brown", PRODUCTS, COLLECTIONS)
    assert (target, reason) == ("/products/red-leather-wallet", "best_match")


def test_resolve_redirect_falls_back_home():
    assert resolve_redirect("https://x.com/", PRODUCTS, COLLECTIONS) == (HOME_PATH, "no_keywords")
    assert resolve_redirect("https://x.com/products/quantum-flux", PRODUCTS, COLLECTIONS) == (HOME_PATH, "no_match")
