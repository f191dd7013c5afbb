"""
Shared fake data generator for tests.
"""

from faker import Faker

fake = Faker()
