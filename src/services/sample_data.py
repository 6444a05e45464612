"""Demo records written by the ``/init-data`` route."""

SAMPLE_PROPERTIES = [
    {
        "id": 1,
        "image": "https://images.unsplash.com/photo-1600596542815-ffad4c1539a9?w=100&h=100&fit=crop",
        "name": "Ocean View Apartment",
        "location": "Miami Beach, FL",
        "status": "Available",
        "price": "$850,000",
        "priceNum": 850000,
        "agent": "Sarah Johnson",
    },
    {
        "id": 2,
        "image": "https://images.unsplash.com/photo-1600607687939-ce8a6c25118c?w=100&h=100&fit=crop",
        "name": "Downtown Condo",
        "location": "New York, NY",
        "status": "Sold",
        "price": "$1,200,000",
        "priceNum": 1200000,
        "agent": "Mike Chen",
    },
]

SAMPLE_AGENTS = [
    {
        "id": 1,
        "name": "Sarah Johnson",
        "email": "sarah.j@homespace.com",
        "phone": "+1 (555) 123-4567",
        "location": "Miami, FL",
        "properties": 28,
        "sales": "$3.2M",
        "rating": 4.9,
        "status": "Active",
        "avatar": "",
    },
    {
        "id": 2,
        "name": "Mike Chen",
        "email": "mike.c@homespace.com",
        "phone": "+1 (555) 234-5678",
        "location": "New York, NY",
        "properties": 24,
        "sales": "$2.8M",
        "rating": 4.8,
        "status": "Active",
        "avatar": "",
    },
]

SAMPLE_CLIENTS = [
    {
        "id": 1,
        "name": "John Smith",
        "email": "john.smith@email.com",
        "phone": "+1 (555) 111-2222",
        "type": "Buyer",
        "assignedAgent": "Sarah Johnson",
        "properties": 2,
        "status": "Active",
        "avatar": "",
    },
]


def _transaction(txn_id, date, prop, client, agent, amount, status):
    return {
        "id": txn_id,
        "date": date,
        "property": prop,
        "client": client,
        "agent": agent,
        "amount": amount,
        "status": status,
    }


SAMPLE_TRANSACTIONS = [
    _transaction("TXN-001", "2024-10-14", "Ocean View Apartment", "John Smith", "Sarah Johnson", "$850,000", "Completed"),
    _transaction("TXN-002", "2024-10-13", "Downtown Condo", "Emily Brown", "Mike Chen", "$1,200,000", "Completed"),
    _transaction("TXN-003", "2024-10-12", "Suburban House", "Michael Johnson", "Emma Davis", "$650,000", "Pending"),
    _transaction("TXN-004", "2024-10-11", "Luxury Villa", "Sarah Williams", "James Wilson", "$2,500,000", "Pending"),
    _transaction("TXN-005", "2024-10-10", "Lakefront Property", "David Lee", "Lisa Anderson", "$980,000", "Completed"),
    _transaction("TXN-006", "2024-10-09", "City Loft", "Jessica Martinez", "Sarah Johnson", "$720,000", "Cancelled"),
    _transaction("TXN-007", "2024-10-08", "Beachfront Estate", "Robert Taylor", "Mike Chen", "$1,800,000", "Completed"),
    _transaction("TXN-008", "2024-10-07", "Mountain Cabin", "Amanda Wilson", "Emma Davis", "$450,000", "Pending"),
]
