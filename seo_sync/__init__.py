"""Google Sheet driven sync jobs for a Shopify store (prices, alt text, 404 redirects)."""

__version__ = "0.1.0"
