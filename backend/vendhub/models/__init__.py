from vendhub.core.database import Base
from vendhub.models.machine_category import MachineCategory
from vendhub.models.product_type import ProductType
from vendhub.models.global_product import GlobalProduct
from vendhub.models.company_product import CompanyProduct
from vendhub.models.machine_template import MachineTemplate

__all__ = [
    "Base",
    "MachineCategory",
    "ProductType",
    "GlobalProduct",
    "CompanyProduct",
    "MachineTemplate",
]
