import os
import json
import logging
import jinja2
import shutil
from decimal import Decimal
from receipt_wrangler import ranking


logger = logging.getLogger(__name__)


def _money(amount):
    return '${:,.2f}'.format(amount)


def _generate_data_json(aggregation, settings):
    """The derived views as JSON, with money as exact strings."""
    def row(named):
        return {k: (str(v) if isinstance(v, Decimal) else v)
                for k, v in named._asdict().items()}

    def point(p):
        return {'date': str(p.date), 'price': str(p.price),
                'formattedDate': p.formatted_date}

    return json.dumps({
        'totalSpent': str(aggregation.total_spent),
        'totalItems': aggregation.total_items,
        'totalVisits': aggregation.total_visits,
        'averageSpend': str(aggregation.average_spend),
        'monthlyData': [row(m) for m in aggregation.monthly_data],
        'topItemsByCount': [row(s) for s in
                            ranking.top_items_by_count(aggregation, settings.top_n)],
        'topItemsBySpent': [row(s) for s in
                            ranking.top_items_by_spent(aggregation, settings.top_n)],
        'warehouseData': [row(w) for w in ranking.warehouse_ranking(aggregation)],
        'priceHistory': {key: [point(p) for p in
                               ranking.price_history_for(aggregation, key)]
                         for key in ranking.eligible_items(aggregation)},
    })


def _generate_pages(html_path, aggregation, settings):
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        loader=jinja2.FileSystemLoader(html_path),
        autoescape=True,
        lstrip_blocks=True,
        trim_blocks=True,
    )
    env.filters['money'] = _money

    pages = {
        'Overview': 'index.html',
        'Items': 'items.html',
        'Warehouses': 'warehouses.html',
        'Transactions': 'transactions.html',
    }

    # used by base.html
    env.globals = {
        'jsimports': ['data.js'],
        'pages': [{'name': title, 'url': filename}
                  for title, filename in pages.items()],
    }

    eligible = ranking.eligible_items(aggregation)
    context = {
        'aggregation': aggregation,
        'top_by_count': ranking.top_items_by_count(aggregation, settings.top_n),
        'top_by_spent': ranking.top_items_by_spent(aggregation, settings.top_n),
        'warehouses': ranking.warehouse_ranking(aggregation),
        'histories': [(key, ranking.price_history_for(aggregation, key))
                      for key in eligible],
        'recent': ranking.search_transactions('', aggregation.transactions,
                                              settings.recent_limit),
    }

    return {filename: env.get_template(filename).render(selectedpage=filename,
                                                        **context)
            for filename in pages.values()}


def generate(root, aggregation, settings):
    """Write the report to <root>/report directory."""
    reportdir = os.path.dirname(os.path.abspath(__file__))
    html_path = os.path.join(reportdir, 'html')

    files = _generate_pages(html_path, aggregation, settings)
    files['data.js'] = 'const receiptModel = {};'.format(
        _generate_data_json(aggregation, settings)
    )

    outdir = os.path.join(root, 'report')
    try:
        shutil.rmtree(outdir)
    except FileNotFoundError:
        pass
    os.mkdir(outdir)
    for filename, datastring in files.items():
        path = os.path.join(outdir, filename)
        with open(path, 'w') as f:
            f.write(datastring)
    logger.info('wrote %d report files to %s', len(files), outdir)
    return outdir
