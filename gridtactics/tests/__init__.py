"""Tests for the gridtactics engine, scenarios, bots, sessions and API."""
