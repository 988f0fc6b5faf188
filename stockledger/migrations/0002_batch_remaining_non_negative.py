from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('stockledger', '0001_initial'),
    ]

    operations = [
        migrations.AddConstraint(
            model_name='productbatch',
            constraint=models.CheckConstraint(
                condition=models.Q(('remaining_quantity__gte', 0)),
                name='product_batch_remaining_non_negative',
            ),
        ),
    ]
