"""Sample listings the storefront opens with.

The rows go through the same normalizer as uploads, so seed data obeys
exactly the same defaulting rules.
"""

from catalogue.ingestion.normalizer import normalize
from catalogue.store import CatalogStore

SEED_ROWS = [
    {
        "id": "1",
        "name": "E-commerce Customer Database",
        "description": "Comprehensive customer data with purchase history, demographics, and behavior patterns",
        "price": "199.99",
        "category": "E-commerce",
        "format": "CSV",
        "size": "2.4 GB",
        "records": 1250000,
    },
    {
        "id": "2",
        "name": "Financial Markets Dataset",
        "description": "Historical stock prices, trading volumes, and market indicators from 2010-2024",
        "price": "599.99",
        "category": "Finance",
        "format": "JSON",
        "size": "8.1 GB",
        "records": 3400000,
    },
    {
        "id": "3",
        "name": "Social Media Analytics",
        "description": "Anonymized social media posts, engagement metrics, and sentiment analysis data",
        "price": "149.99",
        "category": "Social Media",
        "format": "CSV",
        "size": "1.7 GB",
        "records": 890000,
    },
    {
        "id": "4",
        "name": "Real Estate Listings Database",
        "description": "Property listings with prices, locations, features, and market trends",
        "price": "249.99",
        "category": "Real Estate",
        "format": "XLSX",
        "size": "950 MB",
        "records": 750000,
    },
    {
        "id": "5",
        "name": "Healthcare Research Data",
        "description": "Clinical trial data, patient outcomes, and medical device performance metrics",
        "price": "349.99",
        "category": "Healthcare",
        "format": "JSON",
        "size": "4.3 GB",
        "records": 2100000,
    },
    {
        "id": "6",
        "name": "Cryptocurrency Trading Data",
        "description": "Bitcoin, Ethereum, and altcoin trading data with order books and price movements",
        "price": "179.99",
        "category": "Cryptocurrency",
        "format": "CSV",
        "size": "3.2 GB",
        "records": 1890000,
    },
]


def seeded_store() -> CatalogStore:
    return CatalogStore(normalize(SEED_ROWS).entries)
