"""Product catalog: reads for the storefront, writes for the admin CMS"""

from typing import List, Optional

from ..models.product import Product, ProductData
from ..storage.base import Repository
from ..utils.exceptions import NotFoundError
from ..utils.logger import get_logger

logger = get_logger(__name__)

COLLECTION = "products"

SAMPLE_PRODUCTS = [
    {
        "title": "Floral Summer Dress",
        "price": "49.99",
        "original_price": "79.99",
        "description": "This beautiful floral summer dress features a flattering A-line silhouette with a V-neckline and short flutter sleeves. Made from lightweight, breathable fabric perfect for warm weather.",
        "images": [
            "https://images.unsplash.com/photo-1485968579580-b6d095142e6e?ixlib=rb-1.2.1&auto=format&fit=crop&w=800&q=80",
            "https://images.unsplash.com/photo-1515886657613-9f3515b0c78f?ixlib=rb-1.2.1&auto=format&fit=crop&w=800&q=80",
            "https://images.unsplash.com/photo-1496747611176-843222e1e57c?ixlib=rb-1.2.1&auto=format&fit=crop&w=800&q=80",
        ],
        "category": "dresses",
        "rating": "4.8",
        "colors": ["Pink", "Blue", "Yellow", "Gray"],
        "sizes": ["XS", "S", "M", "L", "XL"],
    },
    {
        "title": "Casual Maxi Dress",
        "price": "59.99",
        "original_price": "89.99",
        "description": "A comfortable and stylish maxi dress perfect for casual outings. Features a loose fit and soft cotton blend material.",
        "images": ["https://images.unsplash.com/photo-1566174053879-31528523f8cb?ixlib=rb-1.2.1&auto=format&fit=crop&w=800&q=80"],
        "category": "dresses",
        "rating": "4.6",
        "colors": ["Blue", "Black", "White"],
        "sizes": ["S", "M", "L", "XL"],
    },
    {
        "title": "Elegant Evening Dress",
        "price": "89.99",
        "original_price": "129.99",
        "description": "An elegant evening dress perfect for formal occasions. Features a fitted silhouette and premium fabric.",
        "images": ["https://images.unsplash.com/photo-1475180098004-ca77a66827be?ixlib=rb-1.2.1&auto=format&fit=crop&w=800&q=80"],
        "category": "dresses",
        "rating": "4.9",
        "colors": ["Black", "Red", "Navy"],
        "sizes": ["XS", "S", "M", "L"],
    },
    {
        "title": "Bohemian Wrap Dress",
        "price": "65.99",
        "original_price": "95.99",
        "description": "A beautiful bohemian wrap dress with a flattering V-neckline and tie waist. Perfect for summer days.",
        "images": ["https://images.unsplash.com/photo-1495385794356-15371f348c31?ixlib=rb-1.2.1&auto=format&fit=crop&w=800&q=80"],
        "category": "dresses",
        "rating": "4.7",
        "colors": ["Green", "Brown", "Beige"],
        "sizes": ["S", "M", "L"],
    },
    {
        "title": "Printed Summer Dress",
        "price": "55.99",
        "original_price": None,
        "description": "A light and airy printed summer dress with a playful pattern. Perfect for beach days and casual outings.",
        "images": ["https://images.unsplash.com/photo-1572804013309-59a88b7e92f1?ixlib=rb-1.2.1&auto=format&fit=crop&w=800&q=80"],
        "category": "dresses",
        "rating": "4.5",
        "colors": ["Blue", "Pink", "Yellow"],
        "sizes": ["XS", "S", "M", "L", "XL"],
    },
    {
        "title": "Linen Midi Dress",
        "price": "69.99",
        "original_price": "99.99",
        "description": "A comfortable linen midi dress, perfect for warm days. Features a relaxed fit and breathable fabric.",
        "images": ["https://images.unsplash.com/photo-1568252542512-9fe8fe9c87bb?ixlib=rb-1.2.1&auto=format&fit=crop&w=800&q=80"],
        "category": "dresses",
        "rating": "4.8",
        "colors": ["White", "Beige", "Olive"],
        "sizes": ["S", "M", "L", "XL"],
    },
    {
        "title": "Flowy Beach Dress",
        "price": "52.99",
        "original_price": "72.99",
        "description": "A lightweight, flowy dress perfect for beach vacations. Made from breathable fabric with a loose, comfortable fit.",
        "images": ["https://images.unsplash.com/photo-1502716119720-b23a93e5fe1b?ixlib=rb-1.2.1&auto=format&fit=crop&w=800&q=80"],
        "category": "dresses",
        "rating": "4.6",
        "colors": ["White", "Blue", "Coral"],
        "sizes": ["XS", "S", "M", "L"],
    },
    {
        "title": "Classic Shirt Dress",
        "price": "75.99",
        "original_price": "95.99",
        "description": "A classic shirt dress with a button-up front and collar. Versatile for both casual and semi-formal occasions.",
        "images": ["https://images.unsplash.com/photo-1492707892479-7bc8d5a4ee93?ixlib=rb-1.2.1&auto=format&fit=crop&w=800&q=80"],
        "category": "dresses",
        "rating": "4.7",
        "colors": ["Blue", "White", "Black"],
        "sizes": ["S", "M", "L", "XL"],
    },
]


class ProductCatalog:

    def __init__(self, repository: Repository):
        self.repository = repository

    def list_products(self) -> List[Product]:
        return [Product(**r) for r in self.repository.all(COLLECTION)]

    def list_by_category(self, category: str) -> List[Product]:
        return [Product(**r) for r in self.repository.find(COLLECTION, category=category)]

    def find(self, product_id: int) -> Optional[Product]:
        record = self.repository.get(COLLECTION, product_id)
        return Product(**record) if record else None

    def get(self, product_id: int) -> Product:
        product = self.find(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def create(self, data: ProductData) -> Product:
        record = self.repository.insert(COLLECTION, data.model_dump(mode="json"))
        logger.info("Product created", product_id=record["id"])
        return Product(**record)

    def update(self, product_id: int, data: ProductData) -> Product:
        """Replace every editable field of a product"""
        record = self.repository.update(COLLECTION, product_id, data.model_dump(mode="json"))
        if record is None:
            raise NotFoundError("Product not found")
        logger.info("Product updated", product_id=product_id)
        return Product(**record)

    def delete(self, product_id: int) -> None:
        if not self.repository.delete(COLLECTION, product_id):
            raise NotFoundError("Product not found")
        logger.info("Product deleted", product_id=product_id)

    def seed_samples(self) -> int:
        """Insert the sample dresses into an empty catalog"""
        with self.repository.transaction():
            if self.repository.count(COLLECTION):
                return 0
            for sample in SAMPLE_PRODUCTS:
                self.create(ProductData(**sample))
        logger.info("Seeded sample products", count=len(SAMPLE_PRODUCTS))
        return len(SAMPLE_PRODUCTS)
