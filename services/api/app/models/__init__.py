"""SQLAlchemy ORM models.

Models represent database tables:
- medication_strategies: Curated savings playbook per medication
- savings_options: Copay cards, PAPs, foundations per medication
- pharmacy_availability: Which pharmacies carry a medication, and at what price
- price_reports: Crowd-sourced price observations
"""

from app.models.medication_strategy import MedicationStrategy
from app.models.savings_option import SavingsOption
from app.models.pharmacy_availability import PharmacyAvailability
from app.models.price_report import PriceReport

__all__ = ["MedicationStrategy", "SavingsOption", "PharmacyAvailability", "PriceReport"]
