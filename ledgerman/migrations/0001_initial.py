"""
Initial migration for Ledgerman models.
"""

from decimal import Decimal
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


HOLDER_CHOICES = [('branch', 'Filial'), ('warehouse', 'Armazém')]
INVOICING_CHOICES = [('not_invoiced', 'Não faturado'), ('invoiced', 'Faturado')]
PAYMENT_CHOICES = [('unpaid', 'Em aberto'), ('partially_paid', 'Pago parcialmente'), ('paid', 'Pago')]


def document_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('code', models.CharField(max_length=100, unique=True, verbose_name='Código')),
        ('date', models.DateField(verbose_name='Data')),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
        ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Usuário')),
    ]


def location_fields():
    return [
        ('holder_type', models.CharField(choices=HOLDER_CHOICES, max_length=20, verbose_name='Tipo de local')),
        ('holder_id', models.PositiveBigIntegerField(verbose_name='ID do local')),
    ]


def holder_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('code', models.SlugField(unique=True, verbose_name='Código')),
        ('name', models.CharField(max_length=100, verbose_name='Nome')),
        ('initial', models.CharField(help_text='Usada no SKU dos lotes (ex: SP1)', max_length=10, verbose_name='Sigla')),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):
    """Create Ledgerman models: holders, items, batches, movements and documents."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        # =====================================================================
        # MASTER DATA
        # =====================================================================
        migrations.CreateModel(
            name='Branch',
            fields=holder_fields(),
            options={
                'verbose_name': 'Filial',
                'verbose_name_plural': 'Filiais',
                'ordering': ['code'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Warehouse',
            fields=holder_fields(),
            options={
                'verbose_name': 'Armazém',
                'verbose_name_plural': 'Armazéns',
                'ordering': ['code'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=50, unique=True, verbose_name='Código')),
                ('name', models.CharField(max_length=200, verbose_name='Nome')),
                ('category', models.CharField(blank=True, default='', max_length=100, verbose_name='Categoria')),
                ('unit', models.CharField(default='un', max_length=20, verbose_name='Unidade base')),
                ('wholesale_unit', models.CharField(blank=True, default='', max_length=20, verbose_name='Unidade de atacado')),
                ('wholesale_factor', models.DecimalField(blank=True, decimal_places=3, help_text='Quantidade na unidade base por unidade de atacado', max_digits=12, null=True, verbose_name='Fator de conversão')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Item',
                'verbose_name_plural': 'Itens',
                'ordering': ['code'],
            },
        ),

        # =====================================================================
        # LEDGER
        # =====================================================================
        migrations.CreateModel(
            name='StockBatch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *location_fields(),
                ('sku', models.CharField(db_index=True, max_length=100, verbose_name='SKU do lote')),
                ('quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Quantidade')),
                ('unit_cost', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=15, verbose_name='Custo unitário')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Criado em')),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='batches', to='ledgerman.item', verbose_name='Item')),
            ],
            options={
                'verbose_name': 'Lote',
                'verbose_name_plural': 'Lotes',
                'ordering': ['created_at', 'id'],
                'indexes': [models.Index(fields=['item', 'holder_type', 'holder_id', 'created_at'], name='stock_batch_fifo_idx')],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity__gte', 0)), name='stock_batch_quantity_non_negative'),
                    models.UniqueConstraint(fields=['holder_type', 'holder_id', 'sku'], name='stock_batch_sku_unique'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockMovement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *location_fields(),
                ('kind', models.CharField(choices=[('in', 'Entrada'), ('out', 'Saída'), ('adjustment_increase', 'Ajuste (aumento)'), ('adjustment_decrease', 'Ajuste (redução)'), ('transfer', 'Transferência')], max_length=30, verbose_name='Tipo')),
                ('previous_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantidade anterior')),
                ('movement_quantity', models.DecimalField(decimal_places=3, help_text='Sempre positiva. O sentido vem do tipo ou do saldo.', max_digits=12, verbose_name='Quantidade movimentada')),
                ('after_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantidade posterior')),
                ('reference_type', models.CharField(choices=[('goods_receipt_line', 'Item de recebimento'), ('waybill_line', 'Item de guia de remessa'), ('adjustment_line', 'Item de ajuste'), ('audit_line', 'Item de inventário'), ('transfer_line', 'Item de transferência')], max_length=30, verbose_name='Tipo de referência')),
                ('reference_id', models.PositiveBigIntegerField(verbose_name='ID da referência')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Data/Hora')),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='ledgerman.stockbatch', verbose_name='Lote')),
            ],
            options={
                'verbose_name': 'Movimento',
                'verbose_name_plural': 'Movimentos',
                'ordering': ['created_at', 'id'],
                'indexes': [
                    models.Index(fields=['batch', 'created_at'], name='stock_move_batch_idx'),
                    models.Index(fields=['holder_type', 'holder_id', 'created_at'], name='stock_move_location_idx'),
                    models.Index(fields=['reference_type', 'reference_id'], name='stock_move_reference_idx'),
                ],
            },
        ),

        # =====================================================================
        # PROCUREMENT
        # =====================================================================
        migrations.CreateModel(
            name='PurchaseOrder',
            fields=[
                *document_fields(),
                ('supplier', models.CharField(max_length=200, verbose_name='Fornecedor')),
                ('expected_delivery_date', models.DateField(blank=True, null=True, verbose_name='Entrega prevista')),
                ('grand_total', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=15, verbose_name='Total geral')),
                ('status', models.CharField(choices=[('pending', 'Pendente'), ('partially_received', 'Recebido parcialmente'), ('received', 'Recebido')], db_index=True, default='pending', max_length=20, verbose_name='Status')),
                ('branch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchase_orders', to='ledgerman.branch', verbose_name='Filial')),
            ],
            options={
                'verbose_name': 'Pedido de compra',
                'verbose_name_plural': 'Pedidos de compra',
                'ordering': ['-date', '-id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='PurchaseOrderLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantidade')),
                ('unit_price', models.DecimalField(decimal_places=4, max_digits=15, verbose_name='Preço unitário')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='ledgerman.item', verbose_name='Item')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='ledgerman.purchaseorder', verbose_name='Pedido')),
            ],
            options={
                'verbose_name': 'Item do pedido de compra',
                'verbose_name_plural': 'Itens do pedido de compra',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='GoodsReceipt',
            fields=[
                *document_fields(),
                *location_fields(),
                ('supplier', models.CharField(max_length=200, verbose_name='Fornecedor')),
                ('received_by', models.CharField(blank=True, default='', max_length=100, verbose_name='Recebido por')),
                ('status', models.CharField(choices=INVOICING_CHOICES, db_index=True, default='not_invoiced', max_length=20, verbose_name='Status')),
                ('purchase_orders', models.ManyToManyField(blank=True, related_name='goods_receipts', to='ledgerman.purchaseorder', verbose_name='Pedidos de compra')),
            ],
            options={
                'verbose_name': 'Recebimento',
                'verbose_name_plural': 'Recebimentos',
                'ordering': ['-date', '-id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='GoodsReceiptLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('received_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantidade recebida')),
                ('unit_cost', models.DecimalField(decimal_places=4, max_digits=15, verbose_name='Custo unitário')),
                ('batch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to='ledgerman.stockbatch', verbose_name='Lote')),
                ('purchase_order_line', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='receipt_lines', to='ledgerman.purchaseorderline', verbose_name='Item do pedido')),
                ('receipt', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='ledgerman.goodsreceipt', verbose_name='Recebimento')),
            ],
            options={
                'verbose_name': 'Item do recebimento',
                'verbose_name_plural': 'Itens do recebimento',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='PurchaseInvoice',
            fields=[
                *document_fields(),
                ('supplier', models.CharField(max_length=200, verbose_name='Fornecedor')),
                ('due_date', models.DateField(blank=True, null=True, verbose_name='Vencimento')),
                ('grand_total', models.DecimalField(decimal_places=2, max_digits=15, verbose_name='Total geral')),
                ('remaining_amount', models.DecimalField(decimal_places=2, max_digits=15, verbose_name='Saldo devedor')),
                ('status', models.CharField(choices=PAYMENT_CHOICES, db_index=True, default='unpaid', max_length=20, verbose_name='Status')),
                ('goods_receipts', models.ManyToManyField(blank=True, related_name='purchase_invoices', to='ledgerman.goodsreceipt', verbose_name='Recebimentos')),
            ],
            options={
                'verbose_name': 'Fatura de compra',
                'verbose_name_plural': 'Faturas de compra',
                'ordering': ['-date', '-id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='PurchaseInvoicePayment',
            fields=[
                *document_fields(),
                ('amount', models.DecimalField(decimal_places=2, max_digits=15, verbose_name='Valor')),
                ('method', models.CharField(blank=True, default='', max_length=50, verbose_name='Forma de pagamento')),
                ('invoice', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payments', to='ledgerman.purchaseinvoice', verbose_name='Fatura')),
            ],
            options={
                'verbose_name': 'Pagamento de fatura de compra',
                'verbose_name_plural': 'Pagamentos de faturas de compra',
                'ordering': ['-date', '-id'],
                'abstract': False,
            },
        ),

        # =====================================================================
        # SALES
        # =====================================================================
        migrations.CreateModel(
            name='SalesOrder',
            fields=[
                *document_fields(),
                ('customer_name', models.CharField(blank=True, default='', max_length=200, verbose_name='Cliente')),
                ('grand_total', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=15, verbose_name='Total geral')),
                ('status', models.CharField(choices=[('pending', 'Pendente'), ('processed', 'Em processamento'), ('completed', 'Concluído'), ('cancelled', 'Cancelado')], db_index=True, default='pending', max_length=20, verbose_name='Status')),
                ('branch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sales_orders', to='ledgerman.branch', verbose_name='Filial')),
            ],
            options={
                'verbose_name': 'Pedido de venda',
                'verbose_name_plural': 'Pedidos de venda',
                'ordering': ['-date', '-id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='SalesOrderLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantidade')),
                ('unit_price', models.DecimalField(decimal_places=4, max_digits=15, verbose_name='Preço unitário')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='ledgerman.item', verbose_name='Item')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='ledgerman.salesorder', verbose_name='Pedido')),
            ],
            options={
                'verbose_name': 'Item do pedido de venda',
                'verbose_name_plural': 'Itens do pedido de venda',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='Waybill',
            fields=[
                *document_fields(),
                *location_fields(),
                ('status', models.CharField(choices=INVOICING_CHOICES, db_index=True, default='not_invoiced', max_length=20, verbose_name='Status')),
                ('sales_order', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='waybills', to='ledgerman.salesorder', verbose_name='Pedido de venda')),
            ],
            options={
                'verbose_name': 'Guia de remessa',
                'verbose_name_plural': 'Guias de remessa',
                'ordering': ['-date', '-id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='WaybillLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantidade')),
                ('description', models.CharField(blank=True, default='', max_length=255, verbose_name='Descrição')),
                ('sales_order_line', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='waybill_lines', to='ledgerman.salesorderline', verbose_name='Item do pedido')),
                ('waybill', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='ledgerman.waybill', verbose_name='Guia de remessa')),
            ],
            options={
                'verbose_name': 'Item da guia de remessa',
                'verbose_name_plural': 'Itens da guia de remessa',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='SalesInvoice',
            fields=[
                *document_fields(),
                ('customer_name', models.CharField(blank=True, default='', max_length=200, verbose_name='Cliente')),
                ('due_date', models.DateField(blank=True, null=True, verbose_name='Vencimento')),
                ('grand_total', models.DecimalField(decimal_places=2, max_digits=15, verbose_name='Total geral')),
                ('paid_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=15, verbose_name='Valor pago')),
                ('remaining_amount', models.DecimalField(decimal_places=2, max_digits=15, verbose_name='Saldo devedor')),
                ('paid_status', models.CharField(choices=PAYMENT_CHOICES, db_index=True, default='unpaid', max_length=20, verbose_name='Status de pagamento')),
                ('branch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='sales_invoices', to='ledgerman.branch', verbose_name='Filial')),
                ('waybills', models.ManyToManyField(blank=True, related_name='sales_invoices', to='ledgerman.waybill', verbose_name='Guias de remessa')),
            ],
            options={
                'verbose_name': 'Fatura de venda',
                'verbose_name_plural': 'Faturas de venda',
                'ordering': ['-date', '-id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='SalesInvoicePayment',
            fields=[
                *document_fields(),
                ('amount', models.DecimalField(decimal_places=2, max_digits=15, verbose_name='Valor')),
                ('method', models.CharField(blank=True, default='', max_length=50, verbose_name='Forma de pagamento')),
                ('note', models.TextField(blank=True, default='', verbose_name='Observação')),
                ('invoice', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payments', to='ledgerman.salesinvoice', verbose_name='Fatura')),
            ],
            options={
                'verbose_name': 'Pagamento de fatura de venda',
                'verbose_name_plural': 'Pagamentos de faturas de venda',
                'ordering': ['-date', '-id'],
                'abstract': False,
            },
        ),

        # =====================================================================
        # STOCK DOCUMENTS
        # =====================================================================
        migrations.CreateModel(
            name='StockAdjustment',
            fields=[
                *document_fields(),
                *location_fields(),
            ],
            options={
                'verbose_name': 'Ajuste de estoque',
                'verbose_name_plural': 'Ajustes de estoque',
                'ordering': ['-date', '-id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='StockAdjustmentLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('before_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Antes do ajuste')),
                ('adjustment_quantity', models.DecimalField(decimal_places=3, help_text='Positivo = aumento, negativo = redução', max_digits=12, verbose_name='Ajuste')),
                ('after_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Depois do ajuste')),
                ('unit_cost', models.DecimalField(blank=True, decimal_places=4, help_text='Só para aumentos. Vazio = política configurada.', max_digits=15, null=True, verbose_name='Custo unitário')),
                ('reason', models.TextField(blank=True, default='', verbose_name='Motivo')),
                ('adjustment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='ledgerman.stockadjustment', verbose_name='Ajuste')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='ledgerman.item', verbose_name='Item')),
            ],
            options={
                'verbose_name': 'Item do ajuste',
                'verbose_name_plural': 'Itens do ajuste',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='StockTransfer',
            fields=[
                *document_fields(),
                ('source_type', models.CharField(choices=HOLDER_CHOICES, max_length=20, verbose_name='Tipo de origem')),
                ('source_id', models.PositiveBigIntegerField(verbose_name='ID da origem')),
                ('destination_type', models.CharField(choices=HOLDER_CHOICES, max_length=20, verbose_name='Tipo de destino')),
                ('destination_id', models.PositiveBigIntegerField(verbose_name='ID do destino')),
            ],
            options={
                'verbose_name': 'Transferência de estoque',
                'verbose_name_plural': 'Transferências de estoque',
                'ordering': ['-date', '-id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='StockTransferLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantidade')),
                ('source_before_quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12)),
                ('source_after_quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12)),
                ('destination_before_quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12)),
                ('destination_after_quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12)),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='ledgerman.item', verbose_name='Item')),
                ('transfer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='ledgerman.stocktransfer', verbose_name='Transferência')),
            ],
            options={
                'verbose_name': 'Item da transferência',
                'verbose_name_plural': 'Itens da transferência',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='StockAudit',
            fields=[
                *document_fields(),
                *location_fields(),
                ('is_locked', models.BooleanField(default=False, verbose_name='Fechado')),
                ('locked_at', models.DateTimeField(blank=True, null=True, verbose_name='Fechado em')),
            ],
            options={
                'verbose_name': 'Inventário',
                'verbose_name_plural': 'Inventários',
                'ordering': ['-date', '-id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='StockAuditLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('system_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantidade no sistema')),
                ('physical_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantidade contada')),
                ('discrepancy_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Diferença')),
                ('reason', models.TextField(blank=True, default='', verbose_name='Motivo')),
                ('audit', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='ledgerman.stockaudit', verbose_name='Inventário')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='ledgerman.item', verbose_name='Item')),
            ],
            options={
                'verbose_name': 'Item do inventário',
                'verbose_name_plural': 'Itens do inventário',
                'ordering': ['id'],
            },
        ),
    ]
