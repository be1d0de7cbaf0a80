"""Fluent SQL builders backed by sqlglot expressions."""

from sqlbound.builder._base import QueryBuilder, arg, named_arg
from sqlbound.builder._delete import Delete
from sqlbound.builder._insert import Insert
from sqlbound.builder._select import Select
from sqlbound.builder._update import Update

__all__ = ("Delete", "Insert", "QueryBuilder", "Select", "Update", "arg", "named_arg")
