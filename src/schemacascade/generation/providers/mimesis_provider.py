"""Mimesis-based value generator."""

from typing import Optional
from mimesis import Address, Finance, Person, Text
from mimesis.locales import Locale
from .base import ValueRequest
from .heuristics import guess_data_kind


class MimesisValueGenerator:
    """Value generator using the Mimesis library."""

    name = "mimesis"

    def __init__(self, locale: Locale = Locale.EN, seed: Optional[int] = None):
        """
        Initialize the Mimesis generator.

        Args:
            locale: Mimesis locale (default: English)
            seed: Optional seed for reproducible output
        """
        self.person = Person(locale, seed=seed)
        self.address = Address(locale, seed=seed)
        self.finance = Finance(locale, seed=seed)
        self.text = Text(locale, seed=seed)

    def generate(self, request: ValueRequest) -> str:
        kind = guess_data_kind(request.field_name)
        if kind == "email":
            return self.person.email()
        if kind == "phone":
            return self.person.phone_number()
        if kind == "person_name":
            return self.person.full_name()
        if kind == "address":
            return self.address.address()
        if kind == "city":
            return self.address.city()
        if kind == "country":
            return self.address.country()
        if kind == "company":
            return self.finance.company()
        if kind == "job":
            return self.person.occupation()
        return self.text.sentence()
