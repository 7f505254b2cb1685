"""Tests for the service and professional catalog."""

import pytest

from salon_api.catalog import (
    PROFESSIONALS,
    SERVICES,
    eligible_services,
    find_service,
    get_professional,
    get_service,
    list_professionals,
    list_services,
    seed_catalog,
)
from salon_api.models import Professional, Service


class TestSeedCatalog:
    """Loading the reference data."""

    def test_seeds_services_and_professionals(self, db):
        assert [s.name for s in list_services(db)] == [
            "Corte Feminino",
            "Corte Masculino",
            "Coloração",
            "Escova",
            "Manicure",
            "Pedicure",
        ]
        assert [p.name for p in list_professionals(db)] == ["Ana Silva", "Carlos Santos", "Maria Oliveira"]

    def test_seeding_twice_adds_nothing(self, db):
        seed_catalog(db)

        assert db.query(Service).count() == len(SERVICES)
        assert db.query(Professional).count() == len(PROFESSIONALS)

    def test_specialties_keep_their_listed_order(self, db):
        carlos = get_professional(db, "2")

        assert carlos.specialties == ["Corte Masculino", "Corte Feminino"]
        assert carlos.service_ids == ["2", "1"]

    def test_unknown_specialty_is_an_error(self, empty_db):
        professionals = [{"id": "9", "name": "Paula", "specialties": ["Corte Feminino", "Maquiagem"]}]

        with pytest.raises(ValueError, match="Maquiagem"):
            seed_catalog(empty_db, professionals=professionals)

        assert empty_db.query(Professional).count() == 0


class TestLookups:
    """Finding services and professionals."""

    def test_get_by_id(self, db):
        assert get_service(db, "3").name == "Coloração"
        assert get_professional(db, "3").name == "Maria Oliveira"
        assert get_service(db, "42") is None
        assert get_professional(db, "42") is None

    def test_find_service_by_id_or_name(self, db):
        assert find_service(db, "4").name == "Escova"
        assert find_service(db, "Escova").id == "4"
        assert find_service(db, "Massagem") is None

    def test_service_details(self, db):
        service = get_service(db, "6")

        assert service.duration_minutes == 60
        assert service.price == 45
        assert service.description == "Cuidados completos para os pés"


class TestEligibleServices:
    """Services a professional can be booked for."""

    def test_eligible_services_follow_catalog_order(self, db):
        carlos = get_professional(db, "2")

        assert [s.name for s in eligible_services(db, carlos)] == ["Corte Feminino", "Corte Masculino"]

    def test_each_professional_has_distinct_services(self, db):
        offered = {p.name: [s.id for s in eligible_services(db, p)] for p in list_professionals(db)}

        assert offered == {
            "Ana Silva": ["1", "3", "4"],
            "Carlos Santos": ["1", "2"],
            "Maria Oliveira": ["5", "6"],
        }
