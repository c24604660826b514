from __future__ import annotations

import random
from decimal import Decimal
from typing import Iterable

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.core.exceptions import ConflictError
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

ADJECTIVES = [
    "Ergonomic", "Rustic", "Sleek", "Compact", "Premium",
    "Durable", "Portable", "Wireless", "Classic", "Smart",
]
NOUNS = [
    "Chair", "Desk", "Monitor", "Keyboard", "Mouse",
    "Lamp", "Headset", "Bookshelf", "Backpack", "Speaker",
    "Notebook", "Tablet", "Router", "Webcam", "Printer",
]
SEED_CUSTOMERS = [
    ("Ana Souza", "ana@example.com"),
    ("Bruno Lima", "bruno@example.com"),
    ("Carla Mendes", "carla@example.com"),
    ("Daniel Costa", "daniel@example.com"),
    ("Eduardo Alves", "eduardo@example.com"),
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument("--products", type=int, default=150)
        parser.add_argument("--seed", type=int, default=42)

    def handle(self, *args, **options):
        random.seed(options["seed"])
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        customers = self._seed_customers()
        products = self._seed_products(options["products"])
        orders_created, orders_confirmed = self._seed_orders(customers, products)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"customers={len(customers)}, "
                f"products={len(products)}, "
                f"orders={orders_created}, "
                f"confirmed={orders_confirmed}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="user").exists():
            User.objects.create_user("user", password="user123")
            created += 1
        return created

    def _seed_customers(self) -> list[Customer]:
        self.stdout.write("Creating customers...")
        customers: list[Customer] = []
        for name, email in SEED_CUSTOMERS:
            customer, _ = Customer.objects.get_or_create(
                email=email, defaults={"name": name}
            )
            customers.append(customer)
        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return customers

    def _seed_products(self, count: int) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        for i in range(1, count + 1):
            name = f"{random.choice(ADJECTIVES)} {random.choice(NOUNS)}"
            cents = random.randint(100_00, 2000_00)
            product, _ = Product.objects.get_or_create(
                sku=f"SKU-{i:05d}",
                defaults={
                    "name": name,
                    "price": Decimal(cents) / 100,
                    "stock": random.randint(5, 100),
                },
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(
        self, customers: Iterable[Customer], products: list[Product]
    ) -> tuple[int, int]:
        """Create 1-3 orders per customer through the order workflow.

        Roughly half of them are confirmed, which decrements stock; a
        confirmation refused for lack of stock leaves the order pending.
        """
        self.stdout.write("Creating orders...")
        customers_list = list(customers)
        if not customers_list or not products:
            self.stdout.write(self.style.WARNING("Skipping orders (no customers/products)."))
            return 0, 0

        service = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        created = confirmed = 0
        for customer in customers_list:
            for _ in range(random.randint(1, 3)):
                selected = random.sample(products, k=min(random.randint(1, 5), len(products)))
                dto = CreateOrderDTO(
                    customer_id=customer.id,
                    items=[
                        CreateOrderItemDTO(product_id=p.id, qty=random.randint(1, 5))
                        for p in selected
                    ],
                )
                order = service.create_order(dto)
                created += 1
                if random.random() < 0.5:
                    try:
                        service.confirm_order(order.id)
                        confirmed += 1
                    except ConflictError as exc:
                        self.stdout.write(self.style.WARNING(f"Order {order.id}: {exc}"))

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return created, confirmed
