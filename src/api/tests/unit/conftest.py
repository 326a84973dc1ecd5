"""Unit test fixtures with mocked dependencies."""

from typing import Any
from unittest.mock import create_autospec

import pytest
from graphql import build_schema, introspection_from_schema

from registry.domain.value_objects import SchemaProviderConfig
from registry.ports.registry_client import IRegistryClient
from registry.ports.registry_models import RegistryResponse

SAMPLE_SDL = """
directive @cacheControl(maxAge: Int) on FIELD_DEFINITION | OBJECT

interface Node {
  id: ID!
}

type User implements Node {
  id: ID!
  name: String @deprecated(reason: "Use fullName")
  fullName: String
  posts(first: Int = 10): [Post!]!
}

type Post implements Node {
  id: ID!
  title: String!
  author: User
}

union SearchResult = User | Post

enum Role {
  ADMIN
  MEMBER
  GUEST @deprecated(reason: "No longer issued")
}

input UserFilter {
  role: Role
  nameContains: String
}

type Query {
  node(id: ID!): Node
  search(term: String!): [SearchResult!]!
  users(filter: UserFilter): [User!]!
}

type Mutation {
  renameUser(id: ID!, name: String!): User
}
"""


def make_registry_response(
    introspection: dict[str, Any] | None,
    schema_hash: str = "5f1c0a9e",
) -> RegistryResponse:
    """Build a registry response carrying ``introspection`` as the schema."""
    schema = (
        None
        if introspection is None
        else {"hash": schema_hash, "introspection": introspection}
    )
    return RegistryResponse(data={"service": {"schema": schema}})


@pytest.fixture
def sample_introspection() -> dict[str, Any]:
    """Provide the introspection payload of SAMPLE_SDL."""
    return introspection_from_schema(build_schema(SAMPLE_SDL))["__schema"]


@pytest.fixture
def provider_config() -> SchemaProviderConfig:
    """Provide a complete provider configuration."""
    return SchemaProviderConfig.model_validate(
        {
            "engine": {"engineApiKey": "service:my-graph:secret"},
            "client": {"service": "my-graph@staging"},
        }
    )


@pytest.fixture
def mock_registry_client():
    """Provide a mocked registry client."""
    return create_autospec(IRegistryClient, instance=True)
