# seed_products.py

from sqlmodel import Session

from cartify.database import create_db_and_tables, engine
from cartify.models.product import Product
from cartify.repositories.product_repo import ProductRepository

DEMO_PRODUCTS = [
    {
        "title": "Canvas Backpack",
        "description": "Water-resistant 20L everyday backpack.",
        "image": "https://picsum.photos/seed/backpack/400",
        "price": 49.99,
        "quantity": 40,
        "rating": 4.4,
        "category": "bags",
    },
    {
        "title": "Cotton Crew T-Shirt",
        "description": "Heavyweight cotton tee, regular fit.",
        "image": "https://picsum.photos/seed/tshirt/400",
        "price": 14.5,
        "quantity": 120,
        "rating": 4.1,
        "category": "clothing",
    },
    {
        "title": "Stainless Water Bottle",
        "description": "Insulated 750ml bottle, keeps cold 24h.",
        "image": "https://picsum.photos/seed/bottle/400",
        "price": 22.0,
        "quantity": 75,
        "rating": 4.7,
        "category": "home",
    },
    {
        "title": "Wireless Earbuds",
        "description": "Bluetooth 5.3 earbuds with charging case.",
        "image": "https://picsum.photos/seed/earbuds/400",
        "price": 59.0,
        "quantity": 30,
        "rating": 3.9,
        "category": "electronics",
    },
]


def main():
    print("Seeding demo products...")

    create_db_and_tables()
    repo = ProductRepository()
    with Session(engine) as session:
        if repo.count(session) > 0:
            print("Catalog is not empty, nothing to do.")
            return
        for fields in DEMO_PRODUCTS:
            product = repo.create(session, Product(**fields))
            print(f"  #{product.id} {product.title}")

    print("Done.")

if __name__ == "__main__":
    main()
