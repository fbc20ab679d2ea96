"""Call-metric interceptors for gRPC and REST clients and gRPC servers."""