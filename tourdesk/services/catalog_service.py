"""Read-only resource catalog built from master data."""

import logging
from typing import Iterable, Optional, TypeVar

from ..schemas.catalog import BusAsset, FleetVehicle, TourPackage
from .ports import MasterDataProvider

logger = logging.getLogger(__name__)

# Transport types counted by seats on the shared bus pool
BUS_TYPES = frozenset({"Bus", "Tempo Traveller"})

_Asset = TypeVar("_Asset", FleetVehicle, BusAsset)


def _select(assets: tuple[_Asset, ...], ref: Optional[str]) -> Optional[_Asset]:
    """Pick the asset matching ``ref`` by ID or name, else the first one."""
    if not assets:
        return None
    if ref:
        for asset in assets:
            if asset.id == ref:
                return asset
        for asset in assets:
            if asset.name == ref:
                return asset
    return assets[0]


class ResourceCatalog:
    """
    Lookup of bookable assets.

    Entries are immutable; a package update swaps in a new tuple so a
    computation already holding the old one is unaffected.
    """

    def __init__(
        self,
        tour_packages: Iterable[TourPackage] = (),
        fleet_vehicles: Iterable[FleetVehicle] = (),
        bus_assets: Iterable[BusAsset] = (),
    ):
        self.tour_packages: tuple[TourPackage, ...] = tuple(tour_packages)
        self.fleet_vehicles: tuple[FleetVehicle, ...] = tuple(fleet_vehicles)
        self.bus_assets: tuple[BusAsset, ...] = tuple(bus_assets)

    @classmethod
    def from_transports(
        cls,
        tour_packages: Iterable[TourPackage],
        transports: Iterable[FleetVehicle],
    ) -> "ResourceCatalog":
        """Build a catalog from a mixed transport list, routing buses by type."""
        cars = []
        buses = []
        for transport in transports:
            if transport.type in BUS_TYPES:
                buses.append(BusAsset(
                    id=transport.id,
                    name=transport.name,
                    capacity=transport.capacity,
                    base_rate=transport.base_rate,
                ))
            else:
                cars.append(transport)
        return cls(tour_packages, cars, buses)

    @classmethod
    async def load(cls, provider: MasterDataProvider) -> "ResourceCatalog":
        """Load the full catalog from a master-data provider."""
        catalog = cls(
            await provider.list_tour_packages(),
            await provider.list_fleet_vehicles(),
            await provider.list_bus_assets(),
        )
        logger.info(
            "Resource catalog loaded",
            extra={
                "tour_packages": len(catalog.tour_packages),
                "fleet_vehicles": len(catalog.fleet_vehicles),
                "bus_assets": len(catalog.bus_assets),
            }
        )
        return catalog

    def find_package(self, package_id: Optional[str]) -> Optional[TourPackage]:
        """Get a tour package by ID."""
        for package in self.tour_packages:
            if package.id == package_id:
                return package
        return None

    def select_vehicle(self, ref: Optional[str]) -> Optional[FleetVehicle]:
        """Get the fleet vehicle for ``ref``, defaulting to the first vehicle."""
        return _select(self.fleet_vehicles, ref)

    def select_bus(self, ref: Optional[str]) -> Optional[BusAsset]:
        """Get the bus asset for ``ref``, defaulting to the first bus."""
        return _select(self.bus_assets, ref)

    def replace_package(self, package: TourPackage) -> None:
        """Swap in an updated package entry."""
        self.tour_packages = tuple(
            package if existing.id == package.id else existing
            for existing in self.tour_packages
        )
