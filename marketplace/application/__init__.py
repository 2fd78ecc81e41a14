"""
Capa de Aplicación - Marketplace de alquileres.

Contiene los casos de uso, DTOs e interfaces (puertos). Orquesta las reglas
del dominio y define los contratos con la infraestructura.

Estructura:
- use_cases/: Un caso de uso por operación (método ``execute``)
- dtos/: Data Transfer Objects
- interfaces/: Puertos (repositorios, reloj, generador de ids, notificador)
"""
