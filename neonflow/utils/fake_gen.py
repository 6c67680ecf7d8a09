from faker import Faker
from faker.providers import BaseProvider


class NeonFlowProvider(BaseProvider):
    """
    Demo data for the forge command.
    Futuristic product names, catalog categories, outlets and waste items.
    """

    tech_prefixes = [
        'Quantum', 'Neural', 'Photon', 'Plasma', 'Fusion', 'Holo',
        'Cyber', 'Titan', 'Nano', 'Ion', 'Pulse', 'Vortex'
    ]

    product_suffixes = [
        'Processor', 'Link Interface', 'Battery Cell', 'Sensor Array',
        'Drone Kit', 'Servo Arm', 'Power Core', 'Shield Module',
        'Optic Cable', 'Control Hub', 'Memory Crystal', 'Converter'
    ]

    categories = ['Electronics', 'Components', 'Power', 'Robotics', 'Optics', 'Accessories']

    waste_items = [
        ('Bread Loaf', 'Pcs'), ('Milk', 'Liter'), ('Rice', 'Karung'),
        ('Vegetables', 'Ikat'), ('Cooking Oil', 'Jerrycan'), ('Sugar', 'Kg'),
        ('Snack Box', 'Kardus')
    ]

    def tech_product_name(self):
        return f"{self.random_element(self.tech_prefixes)} {self.random_element(self.product_suffixes)}"

    def tech_sku(self, name):
        initials = ''.join(word[0] for word in name.split()).upper()
        return f"{initials}-{self.random_int(100, 999)}"

    def catalog_category(self):
        return self.random_element(self.categories)

    def outlet_name(self):
        return f"Outlet {self.generator.city()}"

    def waste_item(self):
        return self.random_element(self.waste_items)


fake = Faker('en_US')
fake.add_provider(NeonFlowProvider)
