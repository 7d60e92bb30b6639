"""Order lifecycle: review orders, status history and approval into finalized orders."""
