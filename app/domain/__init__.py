"""Domain packages: schemas, repository, service and router per entity"""
