# zeroone/models/entities.py
"""Example record types for common ZeroOne views.

These are ordinary payload types for ``ViewsClient`` operations; any other
pydantic-compatible type works the same way. Field aliases are the wire names.
Ids are strings; numeric ids sent by the API are converted to strings.
"""

from pydantic import BaseModel, ConfigDict, Field


class Activity(BaseModel):
    """A record of the activities view."""

    activity_id: str = Field(alias="ActividadId")
    name: str = Field(alias="Nombre")

    model_config = ConfigDict(
        populate_by_name=True, extra="allow", coerce_numbers_to_str=True
    )


class Client(BaseModel):
    """A record of the clients view."""

    client_id: str = Field(alias="ClienteId")
    name: str = Field(alias="Nombre")

    model_config = ConfigDict(
        populate_by_name=True, extra="allow", coerce_numbers_to_str=True
    )


class Project(BaseModel):
    """A record of the projects view, linked to its client by ``client_id``."""

    project_id: str = Field(alias="ProyectoId")
    name: str = Field(alias="Nombre")
    client_id: str = Field(alias="ClienteId")

    model_config = ConfigDict(
        populate_by_name=True, extra="allow", coerce_numbers_to_str=True
    )


class ListsResponse(BaseModel):
    """Combined catalogue of activities, clients and projects."""

    activities: list[Activity] = Field(default_factory=list, alias="Actividades")
    clients: list[Client] = Field(default_factory=list, alias="Clientes")
    projects: list[Project] = Field(default_factory=list, alias="Proyectos")

    model_config = ConfigDict(populate_by_name=True, extra="allow")
