from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("inquiry", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="inquiry",
            name="sender_name",
            field=models.TextField(),
        ),
        migrations.AlterField(
            model_name="inquiry",
            name="sender_phone",
            field=models.TextField(blank=True, default=""),
        ),
    ]
