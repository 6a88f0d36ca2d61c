"""Shared test configuration and fixtures."""

import pytest


@pytest.fixture
def order_number():
    """Order number used by the order scenarios."""
    return "AB12C"


@pytest.fixture
def order_xml(order_number):
    """An order document as written by other XML serializers."""
    return f"""<TestOrder
                  xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
                  xmlns:xsd="http://www.w3.org/2001/XMLSchema">
                  <OrderNumber>{order_number}</OrderNumber>
             </TestOrder>"""
