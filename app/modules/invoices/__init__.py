"""
Módulo de Facturación (Invoices)

Este módulo maneja la facturación a clientes con las siguientes características:

- Creación de facturas con totales calculados en el servidor
- Numeración única INV-XXXXXXXX-XXX
- Listado con filtro por cliente y ordenamiento por fecha o monto
- Generación de PDF
- Envío por email con el PDF adjunto

Tablas principales:
- invoices: Facturas
- invoice_items: Ítems de factura (ordenados por posición)
"""
