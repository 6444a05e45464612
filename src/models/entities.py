"""Back-office entity models: properties, agents, clients and transactions."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Type, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator


# Leading numeric prefix, mirroring how the dashboard parses display amounts
_NUMBER_PREFIX = re.compile(r'^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?')


def parse_amount(display: Optional[str]) -> float:
    """
    Derive the numeric value of a display amount such as ``"$1,234,567"``.

    ``$`` and ``,`` are stripped and the leading number is parsed; anything
    unparseable (``"N/A"``, empty, ``None``) yields 0.
    """
    if display is None:
        return 0.0
    cleaned = re.sub(r'[$,]', '', str(display))
    match = _NUMBER_PREFIX.match(cleaned)
    if not match:
        return 0.0
    return float(match.group(0))


class PropertyStatus(str, Enum):
    AVAILABLE = "Available"
    SOLD = "Sold"
    PENDING = "Pending"


class AgentStatus(str, Enum):
    ACTIVE = "Active"
    AWAY = "Away"
    INACTIVE = "Inactive"


class ClientType(str, Enum):
    BUYER = "Buyer"
    SELLER = "Seller"
    INVESTOR = "Investor"


class ClientStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class TransactionStatus(str, Enum):
    COMPLETED = "Completed"
    PENDING = "Pending"
    CANCELLED = "Cancelled"


class EntityModel(BaseModel):
    """Base for records stored in the key-value store.

    Attributes are snake_case, the wire format is camelCase. Fields the
    models do not know about are carried through untouched.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_wire(self) -> dict:
        """Serialize to the JSON shape used on the wire and in the store."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class Property(EntityModel):
    """Property listing."""
    id: Optional[Union[int, str]] = Field(None, description="Property ID (time-based integer)")
    name: str = Field(..., description="Property name")
    location: str = Field(..., description="City / area")
    status: PropertyStatus = Field(default=PropertyStatus.AVAILABLE)
    price: str = Field(default="", description="Display price, e.g. $850,000")
    price_num: float = Field(default=0.0, alias="priceNum", description="Numeric price derived from price")
    agent: str = Field(default="", description="Listing agent name (free text)")
    image: Optional[str] = None
    description: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    sqft: Optional[int] = None

    @model_validator(mode="after")
    def _derive_price_num(self) -> "Property":
        self.price_num = parse_amount(self.price)
        return self


class Agent(EntityModel):
    """Sales agent."""
    id: Optional[Union[int, str]] = Field(None, description="Agent ID (time-based integer)")
    name: str = Field(..., description="Full name")
    email: str = Field(..., description="Email address")
    phone: str = Field(default="")
    location: str = Field(default="")
    properties: int = Field(default=0, ge=0, description="Number of properties handled")
    sales: str = Field(default="", description="Display sales volume, e.g. $3.2M")
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    status: AgentStatus = Field(default=AgentStatus.ACTIVE)
    avatar: Optional[str] = None


class Client(EntityModel):
    """Buyer, seller or investor."""
    id: Optional[Union[int, str]] = Field(None, description="Client ID (time-based integer)")
    name: str = Field(..., description="Full name")
    email: str = Field(..., description="Email address")
    phone: str = Field(default="")
    type: ClientType = Field(default=ClientType.BUYER)
    assigned_agent: str = Field(default="", alias="assignedAgent", description="Agent name (free text)")
    properties: int = Field(default=0, ge=0)
    status: ClientStatus = Field(default=ClientStatus.ACTIVE)
    avatar: Optional[str] = None


class Transaction(EntityModel):
    """Closed or pending deal."""
    id: Optional[str] = Field(None, description="Transaction ID, TXN-<n> or caller supplied")
    date: str = Field(..., description="ISO date, e.g. 2024-10-14")
    property: str = Field(..., description="Property name (free text)")
    client: str = Field(..., description="Client name (free text)")
    agent: str = Field(default="", description="Agent name (free text)")
    amount: str = Field(default="", description="Display amount, e.g. $850,000")
    amount_num: float = Field(default=0.0, alias="amountNum")
    status: TransactionStatus = Field(default=TransactionStatus.PENDING)

    @model_validator(mode="before")
    @classmethod
    def _stringify_id(cls, data):
        if isinstance(data, dict) and isinstance(data.get("id"), int):
            return {**data, "id": str(data["id"])}
        return data

    @model_validator(mode="after")
    def _derive_amount_num(self) -> "Transaction":
        self.amount_num = parse_amount(self.amount)
        return self


@dataclass(frozen=True)
class EntityKind:
    """Static description of one entity kind and the routes it offers."""
    name: str
    plural: str
    model: Type[EntityModel]
    integer_ids: bool = True
    id_prefix: str = ""
    supports_get: bool = True
    supports_update: bool = True

    @property
    def key_prefix(self) -> str:
        return f"{self.name}:"

    @property
    def label(self) -> str:
        return self.name.capitalize()


PROPERTY = EntityKind(name="property", plural="properties", model=Property)
AGENT = EntityKind(name="agent", plural="agents", model=Agent)
CLIENT = EntityKind(name="client", plural="clients", model=Client)
TRANSACTION = EntityKind(
    name="transaction",
    plural="transactions",
    model=Transaction,
    integer_ids=False,
    id_prefix="TXN-",
    supports_get=False,
    supports_update=False,
)

ENTITY_KINDS: dict[str, EntityKind] = {
    kind.plural: kind for kind in (PROPERTY, AGENT, CLIENT, TRANSACTION)
}
