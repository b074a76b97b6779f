"""Resource discovery: request types, server dispatch, cloud providers and filters."""