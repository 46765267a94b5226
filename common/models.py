from enum import Enum
from typing import Optional, List, Dict
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MatchMode(str, Enum):
    CONTAINS = "contains"   # lowercase substring of the header cell
    EXACT = "exact"         # literal header label, case sensitive


class ColumnRole(str, Enum):
    CUSTOMER_ID = "customer_id"
    CUSTOMER_NAME = "customer_name"
    TIMESTAMP = "timestamp"
    TOTAL_TIME = "total_time"
    SECTION = "section"


class RowPolicy(str, Enum):
    NONZERO_TOTAL = "nonzero_total"
    ACCEPT_ALL = "accept_all"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ColumnSpec(BaseModel):
    field: str
    labels: List[str]
    match: MatchMode = MatchMode.CONTAINS
    role: ColumnRole = ColumnRole.SECTION
    display_name: Optional[str] = None
    group: Optional[str] = None
    color: Optional[str] = None


class SchemaDescriptor(BaseModel):
    name: str
    columns: List[ColumnSpec]
    min_columns: int = 1
    row_policy: RowPolicy = RowPolicy.NONZERO_TOTAL


class SessionRecord(CamelModel):
    customer_name: str
    sections: Dict[str, float] = Field(default_factory=dict)
    total_time: float = 0.0
    session_date: str
    session_id: str


class AggregateSnapshot(CamelModel):
    total_users: int = 0
    average_session_time: float = 0.0
    section_averages: Dict[str, float] = Field(default_factory=dict)
    section_totals: Dict[str, float] = Field(default_factory=dict)
    most_viewed_section: Optional[str] = None
    least_viewed_section: Optional[str] = None
    group_totals: Dict[str, float] = Field(default_factory=dict)


class TimeSeriesPoint(CamelModel):
    date: str
    total_sessions: int
    average_time: float
    sections: Dict[str, float] = Field(default_factory=dict)


class SectionComparison(CamelModel):
    section: str
    display_name: str
    user_time: float
    average_time: float
    difference_pct: Optional[float] = None
    share_pct: float = 0.0
