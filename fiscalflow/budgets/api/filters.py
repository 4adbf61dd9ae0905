from django_filters import rest_framework as filters

from fiscalflow.budgets.models import BudgetSheet
from fiscalflow.budgets.models import SheetType


class BudgetSheetFilter(filters.FilterSet):
    type = filters.ChoiceFilter(field_name="sheet_type", choices=SheetType.choices)
    status = filters.ChoiceFilter(choices=BudgetSheet.Status.choices)

    class Meta:
        model = BudgetSheet
        fields = ["type", "status", "year", "organization", "department"]
