from django.core.management.base import BaseCommand
from django.db import transaction
import random

from users.models import CustomUser
from shops.models import Shop
from products.models import Product
from ratings.models import Review


class Command(BaseCommand):
    help = 'Seed the database with sample buyers, sellers, shops, products and reviews.'

    def add_arguments(self, parser):
        parser.add_argument('--sellers', type=int, default=5)
        parser.add_argument('--buyers', type=int, default=10)
        parser.add_argument('--seed', type=int, default=None, help='Random seed for repeatable data')

    @transaction.atomic
    def handle(self, *args, **options):
        rng = random.Random(options['seed'])

        # city -> (latitude, longitude)
        locations = {
            "Lagos": (6.5244, 3.3792),
            "Abuja": (9.0765, 7.3986),
            "Port Harcourt": (4.8156, 7.0498),
            "Ibadan": (7.3775, 3.9470),
            "Kaduna": (10.5105, 7.4165),
        }

        categories_data = {
            "fashion": ["Ankara Dress", "Leather Sandals", "Aso Oke Cap"],
            "foods": ["Jollof Spice Mix", "Plantain Chips", "Zobo Drink"],
            "gadget": ["Phone Charger", "Bluetooth Speaker", "Smart Watch"],
            "health and beauty": ["Shea Butter", "Black Soap", "Hair Oil"],
            "accessories": ["Beaded Necklace", "Woven Bag", "Sunglasses"],
        }

        comments = [
            "Great prices and friendly service.",
            "Products arrived exactly as described.",
            "Decent shop but delivery was a bit slow.",
            "Quality could be better for the price.",
            "My favourite place to shop in town!",
        ]

        # === Data Wipe ===
        CustomUser.objects.filter(is_superuser=False).delete()

        shops = []
        for i in range(options['sellers']):
            seller = CustomUser.objects.create_user(
                email=f"seller{i}@mail.com",
                password="TestPass123",
                name=f"Seller {i}",
                user_type=CustomUser.UserType.SELLER,
            )
            city, (lat, lng) = rng.choice(list(locations.items()))
            shop = Shop.objects.create(
                owner=seller,
                shop_name=f"{city} Market {i}",
                location=city,
                # scatter shops a few km around the city centre
                latitude=lat + rng.uniform(-0.05, 0.05),
                longitude=lng + rng.uniform(-0.05, 0.05),
            )
            for category in rng.sample(list(categories_data), k=2):
                for name in categories_data[category]:
                    Product.objects.create(
                        shop=shop,
                        name=name,
                        price=round(rng.uniform(5, 200), 2),
                        category=category,
                    )
            shops.append(shop)

        self.stdout.write(self.style.SUCCESS(f"✅ {len(shops)} sellers, shops and products created."))

        review_count = 0
        for i in range(options['buyers']):
            buyer = CustomUser.objects.create_user(
                email=f"buyer{i}@mail.com",
                password="TestPass123",
                name=f"Buyer {i}",
                user_type=CustomUser.UserType.BUYER,
            )
            for shop in rng.sample(shops, k=min(len(shops), 2)):
                Review.objects.create(
                    shop=shop,
                    user=buyer,
                    user_name=buyer.name,
                    rating=rng.randint(1, 5),
                    comment=rng.choice(comments),
                )
                review_count += 1

        self.stdout.write(self.style.SUCCESS(f"✅ {options['buyers']} buyers and {review_count} reviews created."))
