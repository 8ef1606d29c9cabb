"""Database driver adapters, imported on demand by :func:`dbd.driver.get_driver`."""
