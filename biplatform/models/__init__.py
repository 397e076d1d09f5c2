from biplatform.models.datasource import DataSource, DataSourceType
from biplatform.models.chart import Chart
from biplatform.models.dashboard import Dashboard
from biplatform.models.mlmodel import MLModel
from biplatform.models.requestlog import RequestLog
