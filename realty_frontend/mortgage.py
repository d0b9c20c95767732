# realty_frontend/mortgage.py
# Monthly mortgage estimate shown on the property detail page

from __future__ import annotations

import math
from dataclasses import dataclass

DEFAULT_LOAN_RATIO = 0.8  # 20% down payment
DEFAULT_INTEREST_RATE = 4.5  # percent per year
DEFAULT_TERM_YEARS = 30

MIN_LOAN_RATIO = 0.1
MAX_LOAN_RATIO = 0.9


def monthly_payment(principal: float, annual_rate_percent: float, term_years: float) -> float:
    """
    Fixed-rate monthly payment: M = P[r(1+r)^n] / [(1+r)^n - 1].

    r is the monthly rate and n the number of monthly payments. A zero rate
    spreads the principal evenly; undefined results (e.g. a zero term) are 0.
    """
    n = term_years * 12
    r = annual_rate_percent / 100 / 12

    if n <= 0:
        return 0.0
    if r == 0:
        return principal / n

    growth = math.pow(1 + r, n)
    payment = principal * r * growth / (growth - 1)
    if math.isnan(payment) or math.isinf(payment):
        return 0.0
    return payment


@dataclass
class MortgageQuote:
    property_price: float
    loan_amount: float
    interest_rate: float = DEFAULT_INTEREST_RATE
    term_years: int = DEFAULT_TERM_YEARS

    @classmethod
    def for_price(cls, property_price: float) -> "MortgageQuote":
        return cls(property_price=property_price, loan_amount=property_price * DEFAULT_LOAN_RATIO)

    @property
    def min_loan(self) -> float:
        return self.property_price * MIN_LOAN_RATIO

    @property
    def max_loan(self) -> float:
        return self.property_price * MAX_LOAN_RATIO

    def with_loan_amount(self, amount: float) -> "MortgageQuote":
        """Change the loan; amounts outside 0..90% of the price are ignored."""
        if math.isnan(amount) or amount < 0 or amount > self.max_loan:
            return self
        return MortgageQuote(self.property_price, amount, self.interest_rate, self.term_years)

    def with_down_payment(self, down_payment: float) -> "MortgageQuote":
        """Slider input: loan = price - down payment, clamped to 10%..90% of the price."""
        loan = min(max(self.property_price - down_payment, self.min_loan), self.max_loan)
        return MortgageQuote(self.property_price, loan, self.interest_rate, self.term_years)

    @property
    def down_payment(self) -> float:
        return self.property_price - self.loan_amount

    @property
    def down_payment_percent(self) -> float:
        if not self.property_price:
            return 0.0
        return self.down_payment / self.property_price * 100

    @property
    def monthly_payment(self) -> float:
        return monthly_payment(self.loan_amount, self.interest_rate, self.term_years)
