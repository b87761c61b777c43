"""Keyhold API - accounts and audits backend."""
