from django.db import migrations
from django.db import models


class Migration(migrations.Migration):
    dependencies = [
        ("approvals", "0002_approvalitem"),
    ]

    operations = [
        migrations.AlterField(
            model_name="approvalitem",
            name="total_value",
            field=models.DecimalField(decimal_places=2, max_digits=20),
        ),
    ]
