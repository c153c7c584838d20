from tortoise import fields, models
import uuid


def new_id() -> str:
    return uuid.uuid4().hex


# -------- Clients --------
class Client(models.Model):
    id = fields.CharField(pk=True, max_length=64, default=new_id)
    first_name = fields.CharField(max_length=100, index=True)
    last_name = fields.CharField(max_length=100, index=True)
    birth_date = fields.DateField()
    url_photo = fields.CharField(max_length=500, null=True)

    class Meta:
        table = "clients"

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}"


# -------- Menu --------
class Dish(models.Model):
    id = fields.CharField(pk=True, max_length=64, default=new_id)
    name = fields.CharField(max_length=100, index=True)
    price = fields.FloatField()
    status = fields.BooleanField(default=True, index=True)

    class Meta:
        table = "dishes"

    def __str__(self) -> str:
        return self.name


# -------- Invoices --------
class Invoice(models.Model):
    """
    Invoices keep their client and dish references denormalized as ids only:
      client = {"id": "<client id>"}
      items  = [{"dish": {"id": "<dish id>"}, "quantity": 2}, ...]
    Nothing checks that the ids exist; the report pipeline resolves them on demand.
    """
    id = fields.CharField(pk=True, max_length=64, default=new_id)
    description = fields.CharField(max_length=255, null=True)
    client = fields.JSONField()
    items = fields.JSONField(default=list)

    class Meta:
        table = "invoices"

    def __str__(self) -> str:
        return f"Invoice#{self.id}"
