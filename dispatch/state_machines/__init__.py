#Status transitions for route plans and requests.
