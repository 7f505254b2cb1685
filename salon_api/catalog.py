"""Reference data for the salon: the services offered and who performs them."""

import logging

from sqlalchemy.orm import Session

from salon_api.models import Professional, Service, professional_services

logger = logging.getLogger(__name__)


SERVICES = [
    {
        "id": "1",
        "name": "Corte Feminino",
        "duration_minutes": 60,
        "price": 80,
        "description": "Corte personalizado com lavagem e finalização",
    },
    {
        "id": "2",
        "name": "Corte Masculino",
        "duration_minutes": 30,
        "price": 40,
        "description": "Corte tradicional ou moderno",
    },
    {
        "id": "3",
        "name": "Coloração",
        "duration_minutes": 120,
        "price": 150,
        "description": "Coloração completa com produtos de qualidade",
    },
    {
        "id": "4",
        "name": "Escova",
        "duration_minutes": 45,
        "price": 50,
        "description": "Escova modeladora com finalização",
    },
    {
        "id": "5",
        "name": "Manicure",
        "duration_minutes": 45,
        "price": 35,
        "description": "Cuidados completos para as unhas",
    },
    {
        "id": "6",
        "name": "Pedicure",
        "duration_minutes": 60,
        "price": 45,
        "description": "Cuidados completos para os pés",
    },
]

PROFESSIONALS = [
    {
        "id": "1",
        "name": "Ana Silva",
        "specialties": ["Corte Feminino", "Coloração", "Escova"],
        "avatar": "https://images.pexels.com/photos/3992656/pexels-photo-3992656.jpeg?auto=compress&cs=tinysrgb&w=150",
    },
    {
        "id": "2",
        "name": "Carlos Santos",
        "specialties": ["Corte Masculino", "Corte Feminino"],
        "avatar": "https://images.pexels.com/photos/2379004/pexels-photo-2379004.jpeg?auto=compress&cs=tinysrgb&w=150",
    },
    {
        "id": "3",
        "name": "Maria Oliveira",
        "specialties": ["Manicure", "Pedicure"],
        "avatar": "https://images.pexels.com/photos/1239291/pexels-photo-1239291.jpeg?auto=compress&cs=tinysrgb&w=150",
    },
]

# Booked for today at startup when SEED_DEMO_APPOINTMENTS is on
DEMO_APPOINTMENTS = [
    {
        "client_name": "João Silva",
        "client_phone": "(11) 99999-9999",
        "client_email": "joao@email.com",
        "service_id": "1",
        "professional_id": "1",
        "start_time": "10:00",
        "notes": "Cliente preferencial",
    },
]


def seed_catalog(db: Session, services=None, professionals=None):
    """Insert services and professionals, linking specialties by service id.

    Specialties are written as service names in the seed data. They are
    resolved to ids here, once, and an unknown name is an error rather than
    a professional who silently offers nothing.
    """
    services = SERVICES if services is None else services
    professionals = PROFESSIONALS if professionals is None else professionals

    if db.query(Service).count():
        logger.debug("Catalog already seeded")
        return

    for data in services:
        db.add(Service(**data))
    db.flush()

    ids_by_name = {s.name: s.id for s in db.query(Service).all()}

    for data in professionals:
        db.add(Professional(id=data["id"], name=data["name"], avatar=data.get("avatar")))
        db.flush()

        for position, specialty in enumerate(data["specialties"]):
            service_id = ids_by_name.get(specialty)
            if service_id is None:
                db.rollback()
                raise ValueError(
                    f"Professional {data['name']!r} lists unknown specialty {specialty!r}"
                )
            db.execute(
                professional_services.insert().values(
                    professional_id=data["id"], service_id=service_id, position=position
                )
            )

    db.commit()
    logger.info("Seeded %d services and %d professionals", len(services), len(professionals))


def list_services(db: Session):
    return db.query(Service).order_by(Service.id).all()


def list_professionals(db: Session):
    return db.query(Professional).order_by(Professional.id).all()


def get_service(db: Session, service_id: str):
    return db.query(Service).filter(Service.id == service_id).first()


def get_professional(db: Session, professional_id: str):
    return db.query(Professional).filter(Professional.id == professional_id).first()


def find_service(db: Session, key: str):
    """Resolve a service by id, falling back to its exact name."""
    service = get_service(db, key)
    if service is None:
        service = db.query(Service).filter(Service.name == key).first()
    return service


def eligible_services(db: Session, professional: Professional):
    """Services the professional performs, in catalog order."""
    offered = set(professional.service_ids)
    return [s for s in list_services(db) if s.id in offered]
