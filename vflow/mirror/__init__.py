"""IP and UDP header templates and raw sockets for replicating flow packets."""