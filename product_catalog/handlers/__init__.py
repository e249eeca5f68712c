# product_catalog/handlers/__init__.py
