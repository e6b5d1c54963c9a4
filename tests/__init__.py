"""Tests for the CatCare integration."""
