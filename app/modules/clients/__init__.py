"""
Módulo de Clientes

Registro de contactos facturables, identificados por email único.

Componentes:
- models.py: modelo SQLAlchemy Client
- schemas.py: esquemas Pydantic de entrada y salida
- service.py: lógica de negocio y CRUD
- router.py: endpoints REST /clients
- tests.py: pruebas de integración
"""
