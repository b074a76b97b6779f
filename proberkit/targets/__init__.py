"""Runtime configuration stores, address reporting and resource discovery."""