"""Faker-based value generator."""

from typing import Optional
from faker import Faker
from .base import ValueRequest
from .heuristics import guess_data_kind

FAKER_METHODS = {
    "email": "email",
    "phone": "phone_number",
    "person_name": "name",
    "address": "address",
    "city": "city",
    "country": "country",
    "company": "company",
    "job": "job",
}


class FakerValueGenerator:
    """Value generator using the Faker library."""

    name = "faker"

    def __init__(self, locale: str = "en_US", seed: Optional[int] = None):
        """
        Initialize the Faker generator.

        Args:
            locale: Locale for Faker (default: "en_US")
            seed: Optional seed for reproducible output
        """
        self.fk = Faker(locale)
        if seed is not None:
            self.fk.seed_instance(seed)

    def generate(self, request: ValueRequest) -> str:
        kind = guess_data_kind(request.field_name)
        if kind is not None:
            return str(getattr(self.fk, FAKER_METHODS[kind])())
        if request.hint:
            return f"{self.fk.sentence(nb_words=6).rstrip('.')} ({request.hint})"
        return self.fk.sentence(nb_words=8)
