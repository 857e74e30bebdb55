"""
Colombian PUC (Plan Único de Cuentas) seed template.

Account names are the official PUC names and stay in Spanish.
Nature is left to the account type default (see models.default_nature).
"""
from typing import NamedTuple, Optional

from ..models import AccountType


class TemplateAccount(NamedTuple):
    code: str
    name: str
    ac_type: str
    nature: Optional[str] = None
    tags: tuple = ()


A = AccountType

PUC_TEMPLATE = (
    # CLASE 1: ACTIVO
    TemplateAccount("1", "ACTIVO", A.ASSET),
    TemplateAccount("11", "DISPONIBLE", A.ASSET),
    TemplateAccount("1105", "CAJA", A.ASSET, tags=("CASH",)),
    TemplateAccount("110505", "Caja general", A.ASSET, tags=("CASH",)),
    TemplateAccount("1110", "BANCOS", A.ASSET, tags=("BANK",)),
    TemplateAccount("111005", "Moneda nacional", A.ASSET, tags=("BANK",)),
    TemplateAccount("13", "DEUDORES", A.ASSET),
    TemplateAccount("1305", "CLIENTES", A.ASSET, tags=("RECEIVABLE",)),
    TemplateAccount("130505", "Nacionales", A.ASSET, tags=("RECEIVABLE",)),
    TemplateAccount("14", "INVENTARIOS", A.ASSET),
    TemplateAccount("1435", "MERCANCÍAS NO FABRICADAS POR LA EMPRESA", A.ASSET),
    TemplateAccount("15", "PROPIEDAD, PLANTA Y EQUIPO", A.ASSET),

    # CLASE 2: PASIVO
    TemplateAccount("2", "PASIVO", A.LIABILITY),
    TemplateAccount("22", "PROVEEDORES", A.LIABILITY),
    TemplateAccount("2205", "Nacionales", A.LIABILITY, tags=("PAYABLE",)),
    TemplateAccount("23", "CUENTAS POR PAGAR", A.LIABILITY),
    TemplateAccount("2335", "Costos y gastos por pagar", A.LIABILITY),
    TemplateAccount("2365", "RETENCIÓN EN LA FUENTE", A.LIABILITY, tags=("RETENTION_SOURCE",)),
    TemplateAccount("236540", "Compras", A.LIABILITY),
    TemplateAccount("2367", "IMPUESTO A LAS VENTAS RETENIDO", A.LIABILITY, tags=("RETENTION_IVA",)),
    TemplateAccount("2368", "IMPUESTO DE INDUSTRIA Y COMERCIO RETENIDO", A.LIABILITY, tags=("RETENTION_ICA",)),
    TemplateAccount("24", "IMPUESTOS, GRAVÁMENES Y TASAS", A.LIABILITY, tags=("TAX",)),
    TemplateAccount("2408", "IMPUESTO SOBRE LAS VENTAS POR PAGAR", A.LIABILITY, tags=("VAT",)),
    TemplateAccount("240805", "IVA Generado", A.LIABILITY, tags=("VAT_GENERATED",)),
    TemplateAccount("240810", "IVA Descontable", A.LIABILITY, tags=("VAT_DEDUCTIBLE",)),

    # CLASE 3: PATRIMONIO
    TemplateAccount("3", "PATRIMONIO", A.EQUITY),
    TemplateAccount("31", "CAPITAL SOCIAL", A.EQUITY),
    TemplateAccount("3115", "Aportes sociales", A.EQUITY),
    TemplateAccount("36", "RESULTADOS DEL EJERCICIO", A.EQUITY),
    TemplateAccount("3605", "Utilidad del ejercicio", A.EQUITY),

    # CLASE 4: INGRESOS
    TemplateAccount("4", "INGRESOS", A.INCOME),
    TemplateAccount("41", "OPERACIONALES", A.INCOME),
    TemplateAccount("4135", "COMERCIO AL POR MAYOR Y AL POR MENOR", A.INCOME),

    # CLASE 5: GASTOS
    TemplateAccount("5", "GASTOS", A.EXPENSE),
    TemplateAccount("51", "OPERACIONALES DE ADMINISTRACIÓN", A.EXPENSE),
    TemplateAccount("5105", "GASTOS DE PERSONAL", A.EXPENSE),
    TemplateAccount("5115", "IMPUESTOS", A.EXPENSE),
    TemplateAccount("5135", "SERVICIOS", A.EXPENSE),
    TemplateAccount("52", "OPERACIONALES DE VENTAS", A.EXPENSE),
    TemplateAccount("53", "NO OPERACIONALES", A.EXPENSE),
    TemplateAccount("5305", "FINANCIEROS", A.EXPENSE),

    # CLASE 6: COSTOS DE VENTAS
    TemplateAccount("6", "COSTOS DE VENTAS", A.COST_OF_SALES),
    TemplateAccount("61", "COSTO DE VENTAS Y DE PRESTACIÓN DE SERVICIOS", A.COST_OF_SALES),
    TemplateAccount("6135", "COMERCIO AL POR MAYOR Y AL POR MENOR", A.COST_OF_SALES),
)
