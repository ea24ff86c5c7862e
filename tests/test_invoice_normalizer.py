# Tests for OCR result normalization and catalog reconciliation

import pytest
from src.invoice_normalizer import (
    NormalizedInvoice,
    NormalizedItem,
    merge_refined,
    model_code_score,
    needs_refinement,
    normalize_items,
    normalize_ocr_result,
)


def _item(name, quantity=1, unit_price=1, total_amount=1):
    return NormalizedItem(product_name=name, quantity=quantity, unit_price=unit_price, total_amount=total_amount)


class TestNormalizeItems:
    """Test normalize_items"""

    def test_derived_total(self):
        items = normalize_items([{'productName': 'X', 'quantity': 3, 'unitPrice': 10, 'totalAmount': 0}], [])
        assert items[0].total_amount == 30

    def test_derived_total_rounded(self):
        items = normalize_items([{'productName': 'X', 'quantity': 1, 'unitPrice': '0.33333'}], [])
        assert items[0].total_amount == pytest.approx(0.333)

    def test_existing_total_kept(self):
        items = normalize_items([{'productName': 'X', 'quantity': 3, 'unitPrice': 10, 'totalAmount': 25}], [])
        assert items[0].total_amount == 25

    def test_no_total_without_price(self):
        items = normalize_items([{'productName': 'X', 'quantity': 3}], [])
        assert items[0].total_amount == 0

    def test_snap_back_to_catalog(self):
        raw = [{'productName': '4l90l-2', 'quantity': 1, 'unitPrice': 5, 'totalAmount': 5}]
        items = normalize_items(raw, ['41901-2', '653D-2'])
        assert items[0].product_name == '41901-2'

    def test_unmatched_name_kept(self):
        raw = [{'productName': ' New Item ', 'quantity': 1}]
        items = normalize_items(raw, ['41901-2'])
        assert items[0].product_name == 'New Item'

    @pytest.mark.parametrize('raw', [
        {'productName': 'X', 'quantity': 0, 'unitPrice': 5},
        {'productName': 'X', 'quantity': '-2', 'unitPrice': 5},
        {'productName': 'X', 'unitPrice': 5},
        {'productName': '', 'quantity': 2},
        {'productName': '   ', 'quantity': 2},
        {'quantity': 2},
        'not a row',
        None,
    ])
    def test_invalid_rows_dropped(self, raw):
        assert normalize_items([raw], ['41901-2']) == []

    def test_order_preserved(self):
        raw = [
            {'productName': 'B', 'quantity': 1},
            {'productName': 'dropped', 'quantity': 0},
            {'productName': 'A', 'quantity': 2},
        ]
        assert [i.product_name for i in normalize_items(raw, [])] == ['B', 'A']

    def test_not_a_list(self):
        assert normalize_items(None, []) == []
        assert normalize_items({'productName': 'X'}, []) == []


class TestNormalizeOcrResult:
    """Test whole-response normalization"""

    def test_end_to_end(self):
        payload = {
            'items': [{'productName': 'Ly-159-2', 'quantity': '2', 'unitPrice': '15.000', 'totalAmount': ''}],
            'saleDate': '26-02-20',
        }
        invoice = normalize_ocr_result(payload, ['Ly-159-2'])
        assert invoice.to_dict() == {
            'items': [{'productName': 'Ly-159-2', 'quantity': 2, 'unitPrice': 15, 'totalAmount': 30}],
            'saleDate': '2020-02-26',
        }

    def test_error_passed_through(self):
        invoice = normalize_ocr_result({'items': [], 'error': ' image blurry '}, [])
        assert invoice.error == 'image blurry'
        assert invoice.to_dict() == {'items': [], 'error': 'image blurry'}

    def test_blank_error_ignored(self):
        assert normalize_ocr_result({'error': '  '}, []).error is None
        assert normalize_ocr_result({'error': 42}, []).error is None

    def test_not_a_mapping(self):
        invoice = normalize_ocr_result(['x'], [])
        assert invoice.items == []
        assert invoice.sale_date is None

    def test_fractional_values_kept(self):
        item = _item('X', quantity=1.5, unit_price=2.25, total_amount=3.375)
        assert item.to_dict() == {'productName': 'X', 'quantity': 1.5, 'unitPrice': 2.25, 'totalAmount': 3.375}


class TestRefinement:
    """Second-pass decision and merge"""

    def test_model_code_score(self):
        assert model_code_score('41901-2') == pytest.approx(8.4)
        assert model_code_score('Ly-159-2') == pytest.approx(5.5)
        assert model_code_score('') == 0

    def test_missing_date_needs_refinement(self):
        assert needs_refinement(NormalizedInvoice(items=[_item('41901-2')])) is True

    def test_short_code_needs_refinement(self):
        invoice = NormalizedInvoice(items=[_item('A-12')], sale_date='2026-04-05')
        assert needs_refinement(invoice) is True

    def test_good_result_needs_nothing(self):
        invoice = NormalizedInvoice(items=[_item('41901-2'), _item('Widget')], sale_date='2026-04-05')
        assert needs_refinement(invoice) is False

    def test_refined_items_win_on_better_code(self):
        primary = NormalizedInvoice(items=[_item('A-12')], sale_date='2026-04-05')
        refined = NormalizedInvoice(items=[_item('41901-2')], sale_date='2026-01-01')
        merged = merge_refined(primary, refined)
        assert [i.product_name for i in merged.items] == ['41901-2']
        assert merged.sale_date == '2026-04-05'

    def test_primary_items_kept_otherwise(self):
        primary = NormalizedInvoice(items=[_item('41901-2')])
        refined = NormalizedInvoice(items=[_item('A-12')], sale_date='2026-01-01')
        merged = merge_refined(primary, refined)
        assert [i.product_name for i in merged.items] == ['41901-2']
        assert merged.sale_date == '2026-01-01'

    def test_refined_used_when_primary_empty(self):
        merged = merge_refined(NormalizedInvoice(), NormalizedInvoice(items=[_item('Widget')]))
        assert [i.product_name for i in merged.items] == ['Widget']

    def test_empty_refined_ignored(self):
        primary = NormalizedInvoice(items=[_item('A-12')], error='partly covered')
        merged = merge_refined(primary, NormalizedInvoice())
        assert merged.items == primary.items
        assert merged.error == 'partly covered'


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
