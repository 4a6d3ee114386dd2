"""Lambda handler for the AWS facade API using Mangum."""
from mangum import Mangum

from aws_facade.main import create_app

app = create_app()

handler = Mangum(app, lifespan="off")

# Export handler for Lambda runtime
lambda_handler = handler
