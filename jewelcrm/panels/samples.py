"""Sample records shown when the API is unreachable"""

SAMPLE_INVENTORY = [
    {
        'id': 'sample-1', 'sku': 'JR-001', 'name': 'Diamond Solitaire Ring', 'category': 'Rings',
        'metal': '18K White Gold', 'purity': '750', 'primary_stone': 'Diamond', 'carat_weight': '1.00',
        'quantity': 3, 'price': '2499.99', 'cost': '1250.00', 'status': 'in_stock',
        'vendor_name': 'Golden Metals Co.', 'location_code': 'case1',
        'created_at': '2024-01-15T12:00:00Z', 'updated_at': '2024-01-15T12:00:00Z',
    },
    {
        'id': 'sample-2', 'sku': 'JN-002', 'name': 'Pearl Strand Necklace', 'category': 'Necklaces',
        'metal': '14K Yellow Gold', 'purity': '585', 'primary_stone': 'Pearl', 'carat_weight': None,
        'quantity': 1, 'price': '899.00', 'cost': '420.00', 'status': 'in_stock',
        'vendor_name': 'Ocean Pearl Traders', 'location_code': 'case2',
        'created_at': '2024-01-14T10:30:00Z', 'updated_at': '2024-01-14T10:30:00Z',
    },
    {
        'id': 'sample-3', 'sku': 'JE-003', 'name': 'Sapphire Stud Earrings', 'category': 'Earrings',
        'metal': 'Platinum', 'purity': '950', 'primary_stone': 'Sapphire', 'carat_weight': '0.50',
        'quantity': 0, 'price': '150.00', 'cost': '75.00', 'status': 'in_stock',
        'vendor_name': 'Precision Gems', 'location_code': 'safe1',
        'created_at': '2024-01-13T09:15:00Z', 'updated_at': '2024-01-13T09:15:00Z',
    },
]

SAMPLE_SUPPLIERS = [
    {'id': 'sample-1', 'name': 'Golden Metals Co.', 'code': 'SUP-GOLD', 'category': 'metal',
     'contact_person': 'Anna Reyes', 'email': 'orders@goldenmetals.example.com', 'is_active': True},
    {'id': 'sample-2', 'name': 'Precision Gems', 'code': 'SUP-GEMS', 'category': 'stone',
     'contact_person': 'Raj Patel', 'email': 'sales@precisiongems.example.com', 'is_active': True},
    {'id': 'sample-3', 'name': 'Swift Courier', 'code': 'SUP-SHIP', 'category': 'shipping',
     'contact_person': 'Tom Baker', 'email': 'accounts@swiftcourier.example.com', 'is_active': False},
]

SAMPLE_WORK_ORDERS = [
    {
        'id': 'sample-1', 'number': 'WO-12345', 'status': 'in_production', 'status_display': 'In Production',
        'priority': 'high', 'current_stage': 'stone_setting', 'stage_display': 'Stone Setting', 'progress': 65,
        'customer_name': 'Emma Thompson', 'assigned_to': 'Michael Chen',
        'item_name': 'Custom Diamond Engagement Ring', 'due_date': None, 'days_until_due': None,
        'is_overdue': False,
    },
    {
        'id': 'sample-2', 'number': 'WO-12347', 'status': 'quality_check', 'status_display': 'Quality Check',
        'priority': 'urgent', 'current_stage': 'quality_control', 'stage_display': 'Quality Control',
        'progress': 90, 'customer_name': 'Olivia Park', 'assigned_to': 'David Wilson',
        'item_name': 'Emerald Drop Earrings', 'due_date': None, 'days_until_due': None, 'is_overdue': True,
    },
]

SAMPLE_MARKETPLACE = [
    {
        'id': 'sample-1', 'name': 'CAD Design Sync', 'description': 'Sync CAD renders with work orders',
        'developer': 'JewelTech Labs', 'category': 'design_tools', 'pricing_model': 'subscription',
        'pricing_amount': '29.00', 'billing_cycle': 'month', 'tags': ['cad', '3d', 'design'],
        'rating': '4.7', 'review_count': 128, 'download_count': 2300, 'is_verified': True,
    },
    {
        'id': 'sample-2', 'name': 'GIA Certificate Lookup', 'description': 'Attach grading reports to stones',
        'developer': 'CertBridge', 'category': 'certification_systems', 'pricing_model': 'free',
        'pricing_amount': None, 'billing_cycle': '', 'tags': ['gia', 'certificates'],
        'rating': '4.5', 'review_count': 64, 'download_count': 5100, 'is_verified': True,
    },
    {
        'id': 'sample-3', 'name': 'Ledger Export', 'description': 'Push sales and cost data to accounting',
        'developer': 'Numbers Inc.', 'category': 'accounting_finance', 'pricing_model': 'one_time',
        'pricing_amount': '149.00', 'billing_cycle': '', 'tags': ['accounting', 'export'],
        'rating': '3.9', 'review_count': 22, 'download_count': 640, 'is_verified': False,
    },
]
