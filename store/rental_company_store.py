"""
Rental company reference list.

Typing an unknown company name on a booking form creates that company
first. This is a separate step that runs before the booking save, not a
transaction: a company that was created stays created even if the save
that needed it fails.
"""

from typing import List, NamedTuple, Optional

from api.booking_api import BookingAPIClient, get_api_client
from models.rental_company import RentalCompany
from store.status import LoadingFlag, OperationStatus
from utils.constants import OTHER_RENTAL_COMPANY
from utils.exceptions import APIError, ValidationError
from utils.logging_config import setup_logging

logger = setup_logging(name=__name__)


class CompanyResolution(NamedTuple):
    """Result of resolving the company name on a booking form."""

    name: str
    created: bool


class RentalCompanyStore:
    """Caches the company list and creates new companies on demand."""

    def __init__(self, api: Optional[BookingAPIClient] = None):
        self.api = api or get_api_client()
        self.status = OperationStatus()
        self._companies: List[RentalCompany] = []
        self._loaded = False

    @property
    def companies(self) -> List[RentalCompany]:
        return [company.model_copy() for company in self._companies]

    async def fetch_all(self, force: bool = False) -> List[RentalCompany]:
        """Load the list once; pass force=True to refresh."""
        if self._loaded and not force:
            return self.companies

        self.status.begin(LoadingFlag.LOADING)
        try:
            companies = await self.api.list_rental_companies()
        except APIError as e:
            self.status.fail(LoadingFlag.LOADING, e.message or "Error fetching companies")
            logger.error(f"Failed to fetch rental companies: {e}")
            raise

        self._companies = companies
        self._loaded = True
        self.status.succeed(LoadingFlag.LOADING)
        return self.companies

    def find(self, name: str) -> Optional[RentalCompany]:
        wanted = (name or "").strip().lower()
        for company in self._companies:
            if company.name.strip().lower() == wanted:
                return company
        return None

    def exists(self, name: str) -> bool:
        """Case-insensitive lookup in the loaded list."""
        return self.find(name) is not None

    async def add(self, name: str) -> RentalCompany:
        """Create a company and refresh the list."""
        self.status.begin(LoadingFlag.LOADING, mutation=True)
        try:
            company = await self.api.create_rental_company(name)
        except APIError as e:
            self.status.fail(
                LoadingFlag.LOADING, e.message or "Error adding company", mutation=True
            )
            logger.error(f"Failed to add rental company {name!r}: {e}")
            raise

        self._companies.append(company)
        self.status.succeed(LoadingFlag.LOADING, mutation=True)
        logger.info(f"Added new company: {company.name}")

        await self.fetch_all(force=True)
        return company

    async def resolve(self, name: str, add_new: bool = False) -> CompanyResolution:
        """
        Validate the company on a booking form and create it when asked to.

        Args:
            name: Company name typed or picked by the agent
            add_new: The agent chose "Other" and typed a new name

        Raises:
            ValidationError: Blank name, or add_new with a name that exists
            APIError: Company creation failed
        """
        company_name = (name or "").strip()
        # "Other" is the picker placeholder, not a company
        if not company_name or company_name.lower() == OTHER_RENTAL_COMPANY.lower():
            raise ValidationError("Please enter or select a rental company.")

        await self.fetch_all()

        if not add_new:
            return CompanyResolution(name=company_name, created=False)

        if self.exists(company_name):
            raise ValidationError(
                "This rental company already exists. Please select it or choose 'Other'."
            )

        company = await self.add(company_name)
        return CompanyResolution(name=company.name, created=True)
