"""
Abstract interfaces for storage providers.

Defines contracts for category, unit and product stores. Every lookup
is scoped to an owner: rows of another owner behave as missing.
"""

from abc import ABC, abstractmethod

from stockledger.core.entities.catalog import Category, Unit
from stockledger.core.entities.product import Product


class ICategoryStore(ABC):
    """Interface for category persistence."""

    @abstractmethod
    async def create(self, category: Category) -> Category:
        """Create a new category."""
        pass

    @abstractmethod
    async def get(self, owner_id: str, category_id: int) -> Category | None:
        """Get category by ID."""
        pass

    @abstractmethod
    async def list_all(
        self, owner_id: str, limit: int = 100, offset: int = 0
    ) -> list[Category]:
        """List the owner's categories, newest first."""
        pass

    @abstractmethod
    async def update(self, category: Category) -> Category:
        """Rename a category."""
        pass

    @abstractmethod
    async def delete(self, owner_id: str, category_id: int) -> bool:
        """Delete a category; products keep existing without one."""
        pass


class IUnitStore(ABC):
    """Interface for unit-of-measure persistence."""

    @abstractmethod
    async def create(self, unit: Unit) -> Unit:
        """Create a new unit."""
        pass

    @abstractmethod
    async def get(self, owner_id: str, unit_id: int) -> Unit | None:
        """Get unit by ID."""
        pass

    @abstractmethod
    async def list_all(
        self, owner_id: str, limit: int = 100, offset: int = 0
    ) -> list[Unit]:
        """List the owner's units, newest first."""
        pass

    @abstractmethod
    async def update(self, unit: Unit) -> Unit:
        """Rename a unit."""
        pass

    @abstractmethod
    async def delete(self, owner_id: str, unit_id: int) -> bool:
        """Delete a unit that no product uses."""
        pass


class IProductStore(ABC):
    """Interface for product persistence (descriptive fields only)."""

    @abstractmethod
    async def create(self, product: Product) -> Product:
        """Create a product with zero stock and zero cost."""
        pass

    @abstractmethod
    async def get(self, owner_id: str, product_id: int) -> Product | None:
        """Get product by ID, with category and unit names."""
        pass

    @abstractmethod
    async def list_products(
        self, owner_id: str, limit: int | None = None, offset: int = 0
    ) -> list[Product]:
        """List the owner's products, newest first."""
        pass

    @abstractmethod
    async def count_products(self, owner_id: str) -> int:
        """Number of products the owner has."""
        pass

    @abstractmethod
    async def update(self, product: Product) -> Product:
        """Update name, SKU, threshold, category and unit. Never stock or cost."""
        pass

    @abstractmethod
    async def delete(self, owner_id: str, product_id: int) -> bool:
        """Delete a product and its movements."""
        pass
