"""
Unit tests for catalog payload normalization.
"""
import pytest

from product_catalog.models import Product, ProductPage, Review


class TestReview:

    def test_current_payload_shape(self):
        r = Review.from_payload({"rating": 5, "comment": "Great!", "reviewerName": "Lucas Gordon",
                                 "date": "2024-05-23T08:56:21.618Z"})

        assert r == Review(rating=5, body="Great!", user="Lucas Gordon", date="2024-05-23T08:56:21.618Z")

    def test_older_payload_shape(self):
        r = Review.from_payload({"id": 3, "body": "ok", "rating": "4", "user": {"id": 9, "username": "kminchelle"}})

        assert r.rating == 4
        assert r.body == "ok"
        assert r.user == "kminchelle"

    def test_missing_fields_are_none(self):
        r = Review.from_payload({"rating": None, "comment": "  "})

        assert r == Review(rating=0)


class TestProduct:

    def test_from_payload(self, make_product_payload):
        p = Product.from_payload(make_product_payload(1))

        assert p.id == 1
        assert p.price == 9.99
        assert p.images == ("https://cdn.dummyjson.com/products/1/1.png",)
        assert [r.user for r in p.reviews] == ["John Doe", "Nolan Gonzalez"]
        assert p.average_review_rating == 3.5

    def test_string_price_is_parsed(self, make_product_payload):
        raw = make_product_payload(4)
        raw["price"] = "12.50"

        assert Product.from_payload(raw).price == 12.5

    def test_no_reviews(self, make_product_payload):
        p = Product.from_payload(make_product_payload(2, reviews=[]))

        assert p.reviews == ()
        assert p.average_review_rating is None

    @pytest.mark.parametrize("raw", [None, [], "product", {"title": "no id"}, {"id": "abc"}])
    def test_rejects_unusable_payload(self, raw):
        with pytest.raises(ValueError):
            Product.from_payload(raw)


class TestProductPage:

    def test_from_payload(self, make_product_payload):
        page = ProductPage.from_payload({"products": [make_product_payload(1)], "total": 194, "skip": 0, "limit": 30})

        assert page.total == 194
        assert page.limit == 30
        assert [p.id for p in page.products] == [1]

    def test_empty_list_is_valid(self):
        page = ProductPage.from_payload({"products": []})

        assert page.products == ()
        assert page.total == 0

    def test_rejects_missing_products(self):
        with pytest.raises(ValueError):
            ProductPage.from_payload({"message": "Product not found"})
